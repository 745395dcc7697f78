import boto3

from config import Settings
from logging_config import get_logger

logger = get_logger(__name__)

AWS_SERVICES = ("s3", "transcribe", "rekognition")

client_store = {}

def create_aws_clients(settings: Settings) -> dict:
    logger.info(f"Initializing AWS clients for region {settings.AWS_REGION}")
    session = boto3.session.Session(
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION,
    )
    return {name: session.client(name) for name in AWS_SERVICES}

def close_aws_clients():
    logger.info("Closing AWS clients")
    for name in list(client_store):
        client = client_store.pop(name)
        try:
            client.close()
        except Exception:
            logger.exception(f"Failed to close AWS client '{name}'")

def get_s3_client():
    return client_store["s3"]

def get_transcribe_client():
    return client_store["transcribe"]

def get_rekognition_client():
    return client_store["rekognition"]
