import io
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from tubely.errors import StoreUnavailable
from tubely.services.object_store import S3ObjectStore, build_s3_client


def test_put_sends_key_and_content_type(settings):
    client = MagicMock()
    store = S3ObjectStore(settings, client=client)
    body = io.BytesIO(b"mp4 bytes")
    store.put("landscape/abc.mp4", body, "video/mp4")
    client.put_object.assert_called_once_with(
        Bucket="tubely-test",
        Key="landscape/abc.mp4",
        Body=body,
        ContentType="video/mp4",
    )


@pytest.mark.parametrize(
    "error",
    [
        ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"),
        EndpointConnectionError(endpoint_url="http://localhost:9000"),
    ],
)
def test_put_failure_is_store_unavailable(settings, error):
    client = MagicMock()
    client.put_object.side_effect = error
    with pytest.raises(StoreUnavailable) as exc_info:
        S3ObjectStore(settings, client=client).put("k.mp4", io.BytesIO(b""), "video/mp4")
    assert exc_info.value.status_code == 500


def test_build_client_uses_endpoint_and_keys(settings):
    custom = settings.model_copy(update={
        "s3_endpoint_url": "http://localhost:9000",
        "s3_access_key_id": "minio",
        "s3_secret_access_key": "minio123",
    })
    with patch("tubely.services.object_store.boto3.client") as boto_client:
        build_s3_client(custom)
    kwargs = boto_client.call_args.kwargs
    assert boto_client.call_args.args == ("s3",)
    assert kwargs["endpoint_url"] == "http://localhost:9000"
    assert kwargs["aws_access_key_id"] == "minio"
    assert kwargs["region_name"] == custom.s3_region


def test_build_client_defaults_to_credential_chain(settings):
    with patch("tubely.services.object_store.boto3.client") as boto_client:
        build_s3_client(settings.model_copy(update={"s3_endpoint_url": "", "s3_access_key_id": ""}))
    kwargs = boto_client.call_args.kwargs
    assert "endpoint_url" not in kwargs
    assert "aws_access_key_id" not in kwargs
