"""
Upload storage: a local directory or an S3-compatible bucket, chosen by
STORAGE_TYPE. Callers only rely on the returned dereferenceable URL.
"""
import logging
import os
import random
import time

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from werkzeug.utils import secure_filename

from finance_saas.errors import UnexpectedError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_MIMETYPES = {
    'image/jpeg',
    'image/pjpeg',
    'image/png',
    'image/webp',
    'application/pdf',
}
S3_KEY_PREFIX = 'comprovantes/'


def unique_filename(original_name):
    """<epoch-millis>-<random><ext>, keeping only the original extension."""
    ext = os.path.splitext(secure_filename(original_name or ''))[1].lower()
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


def save_local(file_storage, filename):
    folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(folder, exist_ok=True)
    file_storage.save(os.path.join(folder, filename))
    return {"filename": filename, "url": f"/uploads/{filename}"}


def save_s3(file_storage, filename):
    config = current_app.config
    bucket = config.get('AWS_BUCKET_NAME')
    if not bucket:
        raise UnexpectedError("Armazenamento S3 não configurado.")

    key = f"{S3_KEY_PREFIX}{filename}"
    client = boto3.client(
        's3',
        aws_access_key_id=config.get('AWS_ACCESS_KEY_ID'),
        aws_secret_access_key=config.get('AWS_SECRET_ACCESS_KEY'),
        region_name=config.get('AWS_REGION')
    )
    try:
        client.upload_fileobj(
            file_storage.stream,
            bucket,
            key,
            ExtraArgs={'ContentType': file_storage.mimetype}
        )
    except (BotoCoreError, ClientError) as exc:
        logger.error("S3 upload failed: bucket=%s key=%s error=%s", bucket, key, exc)
        raise UnexpectedError("Erro ao processar arquivo.")

    return {"filename": key, "url": f"https://{bucket}.s3.{config.get('AWS_REGION')}.amazonaws.com/{key}"}


def store_upload(file_storage):
    """Validate and persist an uploaded file. Returns {'filename', 'url'}."""
    if file_storage is None or not file_storage.filename:
        raise ValidationError("Nenhum arquivo enviado.")
    if file_storage.mimetype not in ALLOWED_MIMETYPES:
        raise ValidationError("Tipo de arquivo inválido. Apenas imagens e PDF.")

    filename = unique_filename(file_storage.filename)
    if current_app.config.get('STORAGE_TYPE') == 's3':
        return save_s3(file_storage, filename)
    return save_local(file_storage, filename)
