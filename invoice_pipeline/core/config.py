from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("textract-invoice-pipeline", alias="APP_NAME")
    app_env: str = Field(
        "dev", validation_alias=AliasChoices("APP_ENV", "ENVIRONMENT")
    )

    # AWS
    aws_region: str = Field("ca-central-1", alias="AWS_REGION")
    raw_invoice_bucket: str | None = Field(default=None, alias="RAW_INVOICE_BUCKET")
    dynamodb_table: str | None = Field(default="lambda_invoice_dynamoDB", alias="DYNAMODB_TABLE")
    sns_topic_arn: str | None = Field(default=None, alias="SNS_TOPIC_ARN")

    # Textract
    textract_max_retries: int = Field(3, alias="TEXTRACT_MAX_RETRIES")
    textract_retry_delay: float = Field(1.0, alias="TEXTRACT_RETRY_DELAY")  # seconds, multiplied by attempt number
    textract_timeout: float = Field(30.0, alias="TEXTRACT_TIMEOUT")  # seconds per attempt
    textract_feature_types: str = Field("TABLES,FORMS,SIGNATURES", alias="TEXTRACT_FEATURE_TYPES")

    # Backup of recent raw invoices to cold storage
    backup_bucket: str | None = Field(default=None, alias="BACKUP_BUCKET")
    backup_region: str = Field("us-east-1", alias="BACKUP_REGION")
    backup_window_days: int = Field(7, alias="BACKUP_WINDOW_DAYS")
    backup_max_objects: int = Field(10, alias="BACKUP_MAX_OBJECTS")  # copies per run
    backup_list_limit: int = Field(100, alias="BACKUP_LIST_LIMIT")  # keys listed per run

    # Input validation
    supported_formats: str = Field(".pdf,.png,.jpg,.jpeg,.tiff,.tif", alias="SUPPORTED_FORMATS")
    max_file_size: int = Field(10 * 1024 * 1024, alias="MAX_FILE_SIZE")  # 10MB

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # CORS allowed origins (comma-separated list)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "populate_by_name": True}

    @property
    def feature_types(self) -> list[str]:
        return [f.strip().upper() for f in self.textract_feature_types.split(",") if f.strip()]

    @property
    def supported_extensions(self) -> list[str]:
        return [e.strip().lower() for e in self.supported_formats.split(",") if e.strip()]

settings = Settings()
