import os

from aws_cdk import (
    Stack,
    aws_lambda as _lambda,
    aws_apigateway as apigateway,
    aws_cognito as cognito,
    aws_logs as logs,
    Duration,
    CfnOutput,
    BundlingOptions,
)
from constructs import Construct


# (construct id, handler module, route, timeout seconds, requires sign-in)
FUNCTIONS = [
    ("FetchBookData", "fetch_book_data", "fetch-book-data", 30, False),
    ("EnrichSingleBook", "enrich_single_book", "enrich-single-book", 60, False),
    ("EnrichBooks", "enrich_books", "enrich-books", 900, True),
    ("GetSimilarBooks", "get_similar_books", "get-similar-books", 60, False),
    ("GetRecommendations", "get_recommendations", "get-recommendations", 60, False),
    ("SubmitReview", "submit_review", "submit-review", 30, True),
    ("ImportCsvBooks", "import_csv_books", "import-csv-books", 900, True),
    ("RecategorizeMoods", "recategorize_moods", "recategorize-moods", 900, True),
    ("RecategorizeTropes", "recategorize_tropes", "recategorize-tropes", 900, True),
    ("GenerateQuote", "generate_quote", "generate-quote", 30, False),
]


class ApiStack(Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        storage_stack,
        deployment_env: str,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.storage_stack = storage_stack
        self.deployment_env = deployment_env

        # The project itself plus its runtime dependencies, installed once
        code = _lambda.Code.from_asset(
            "..",
            exclude=["cdk", "cdk.out", "tests", ".git", "*.md"],
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_11.bundling_image,
                command=[
                    "bash",
                    "-c",
                    "pip install . -t /asset-output && echo 'Lambda bundling complete'",
                ],
            ),
        )

        base_env = {
            "ENVIRONMENT": deployment_env,
            "LOG_LEVEL": "INFO" if deployment_env == "prod" else "DEBUG",
            "GOOGLE_BOOKS_API_KEY": os.environ.get("GOOGLE_BOOKS_API_KEY", ""),
            "AI_GATEWAY_API_KEY": os.environ.get("AI_GATEWAY_API_KEY", ""),
            **{env_name: table.table_name for env_name, table in storage_stack.tables.items()},
        }

        self.user_pool = cognito.UserPool(
            self,
            "ReadersUserPool",
            user_pool_name=f"romance-readers-{deployment_env}",
            self_sign_up_enabled=True,
            sign_in_aliases=cognito.SignInAliases(email=True),
        )
        cognito.CfnUserPoolGroup(
            self, "AdminGroup", user_pool_id=self.user_pool.user_pool_id, group_name="admin"
        )
        authorizer = apigateway.CognitoUserPoolsAuthorizer(
            self, "ReadersAuthorizer", cognito_user_pools=[self.user_pool]
        )

        self.api = apigateway.RestApi(
            self,
            "RomanceCatalogApi",
            rest_api_name=f"Romance Catalog API ({deployment_env})",
            description=f"Enrichment and recommendation API - {deployment_env}",
            default_cors_preflight_options=apigateway.CorsOptions(
                allow_origins=apigateway.Cors.ALL_ORIGINS,
                allow_methods=["POST", "OPTIONS"],
                allow_headers=["Content-Type", "Authorization", "X-Correlation-ID"],
                max_age=Duration.hours(1),
            ),
        )
        api_resource = self.api.root.add_resource("api")

        self.functions = {}
        for construct_id, module, route, timeout, requires_auth in FUNCTIONS:
            log_group = logs.LogGroup(
                self,
                f"{construct_id}LogGroup",
                log_group_name=f"/aws/lambda/{construct_id}-{deployment_env}",
                retention=(
                    logs.RetentionDays.ONE_WEEK
                    if deployment_env != "prod"
                    else logs.RetentionDays.ONE_MONTH
                ),
            )

            function = _lambda.Function(
                self,
                construct_id,
                runtime=_lambda.Runtime.PYTHON_3_11,
                handler=f"romance_catalog.handlers.{module}.lambda_handler",
                code=code,
                timeout=Duration.seconds(timeout),
                memory_size=512,
                environment=base_env,
                log_group=log_group,
            )
            for dynamo_table in storage_stack.tables.values():
                dynamo_table.grant_read_write_data(function)

            method_options = {}
            if requires_auth:
                method_options = {
                    "authorizer": authorizer,
                    "authorization_type": apigateway.AuthorizationType.COGNITO,
                }
            api_resource.add_resource(route).add_method(
                "POST", apigateway.LambdaIntegration(function, proxy=True), **method_options
            )
            self.functions[module] = function

        CfnOutput(self, "ApiUrl", value=self.api.url, description="API Gateway URL")
        CfnOutput(self, "ApiId", value=self.api.rest_api_id, description="API Gateway ID")
        CfnOutput(
            self, "UserPoolId", value=self.user_pool.user_pool_id, description="Cognito user pool for readers"
        )
