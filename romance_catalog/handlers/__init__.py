"""
API Gateway Lambda handlers. Each module exposes `lambda_handler(event, context)`.
"""
