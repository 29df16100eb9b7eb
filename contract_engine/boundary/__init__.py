"""
Boundary layer for external system integrations.

Handles all interactions with AWS (S3, DynamoDB, Cognito, SES).
Provides clients and table repositories for the application services.
"""
