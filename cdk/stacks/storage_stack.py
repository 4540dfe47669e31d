from aws_cdk import (
    Stack,
    aws_dynamodb as dynamodb,
    RemovalPolicy,
    CfnOutput,
)
from constructs import Construct


class StorageStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, deployment_env: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.deployment_env = deployment_env
        suffix = "" if deployment_env == "prod" else f"-{deployment_env}"
        removal_policy = RemovalPolicy.RETAIN if deployment_env == "prod" else RemovalPolicy.DESTROY

        def table(construct_name: str, table_name: str) -> dynamodb.Table:
            return dynamodb.Table(
                self, construct_name,
                table_name=f"{table_name}{suffix}",
                partition_key=dynamodb.Attribute(name="id", type=dynamodb.AttributeType.STRING),
                billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
                point_in_time_recovery=deployment_env == "prod",
                removal_policy=removal_policy,
            )

        # Catalog records, enriched in place
        self.books_table = table("BooksTable", "romance-books")

        # Append-only audit trail, one row per enrichment attempt
        self.enrichment_logs_table = table("EnrichmentLogsTable", "romance-enrichment-logs")

        self.reviews_table = table("ReviewsTable", "romance-reviews")

        # Book quotes, filled by enrichment and served by generate-quote
        self.quotes_table = table("QuotesTable", "romance-quotes")

        # Small lookup tables: id -> name
        self.genres_table = table("GenresTable", "romance-genres")
        self.moods_table = table("MoodsTable", "romance-moods")

        self.tables = {
            "BOOKS_TABLE": self.books_table,
            "ENRICHMENT_LOGS_TABLE": self.enrichment_logs_table,
            "REVIEWS_TABLE": self.reviews_table,
            "QUOTES_TABLE": self.quotes_table,
            "GENRES_TABLE": self.genres_table,
            "MOODS_TABLE": self.moods_table,
        }

        for env_name, dynamo_table in self.tables.items():
            CfnOutput(
                self, f"{dynamo_table.node.id}Name",
                value=dynamo_table.table_name,
                description=f"DynamoDB table for {env_name}",
            )
