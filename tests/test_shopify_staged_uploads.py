"""Tests for staged upload negotiation."""
import pytest
import requests

from shopify_image_sync.errors import MalformedResponse, RemoteQueryError, UploadTargetRejected
from shopify_image_sync.shopify_staged_uploads import ShopifyStagedUploadManager, StagedUploadTarget

from conftest import make_response


def staged_response(targets=None, user_errors=None):
    return make_response({'data': {'stagedUploadsCreate': {
        'stagedTargets': targets if targets is not None else [],
        'userErrors': user_errors or []
    }}})


class TestNegotiate:
    """Test ShopifyStagedUploadManager.negotiate."""

    def test_returns_target_with_ordered_parameters(self, config, graphql_session):
        graphql_session.post.return_value = staged_response([{
            'url': 'https://storage.example.com/upload',
            'resourceUrl': 'https://cdn/x.jpg',
            'parameters': [
                {'name': 'key', 'value': 'abc'},
                {'name': 'Content-Type', 'value': 'image/jpeg'},
                {'name': 'acl', 'value': 'private'}
            ]
        }])
        manager = ShopifyStagedUploadManager(config, graphql_session)

        target = manager.negotiate('red-mug.jpg', 'image/jpeg', 500000)

        assert target == StagedUploadTarget(
            url='https://storage.example.com/upload',
            resource_url='https://cdn/x.jpg',
            parameters=(('key', 'abc'), ('Content-Type', 'image/jpeg'), ('acl', 'private'))
        )

    def test_declares_image_post_upload(self, config, graphql_session):
        graphql_session.post.return_value = staged_response([{
            'url': 'https://storage.example.com/upload', 'resourceUrl': 'https://cdn/x.jpg', 'parameters': []
        }])
        ShopifyStagedUploadManager(config, graphql_session).negotiate('red-mug.jpg', 'image/jpeg', 500000)

        variables = graphql_session.post.call_args[1]['json']['variables']
        assert variables == {'input': [{
            'resource': 'IMAGE',
            'filename': 'red-mug.jpg',
            'mimeType': 'image/jpeg',
            'fileSize': '500000',
            'httpMethod': 'POST'
        }]}

    def test_user_error_surfaces_first_message(self, config, graphql_session):
        graphql_session.post.return_value = staged_response(user_errors=[
            {'field': ['input', '0', 'fileSize'], 'message': 'File size is too large'},
            {'field': ['input', '0', 'mimeType'], 'message': 'Unsupported type'}
        ])
        manager = ShopifyStagedUploadManager(config, graphql_session)

        with pytest.raises(UploadTargetRejected) as exc_info:
            manager.negotiate('huge.jpg', 'image/jpeg', 10 ** 10)

        assert str(exc_info.value) == 'File size is too large'
        assert exc_info.value.field == ['input', '0', 'fileSize']

    def test_transport_error(self, config, graphql_session):
        graphql_session.post.side_effect = requests.exceptions.ConnectionError('reset by peer')
        manager = ShopifyStagedUploadManager(config, graphql_session)

        with pytest.raises(RemoteQueryError):
            manager.negotiate('red-mug.jpg', 'image/jpeg', 1)

    def test_no_targets(self, config, graphql_session):
        graphql_session.post.return_value = staged_response([])
        manager = ShopifyStagedUploadManager(config, graphql_session)

        with pytest.raises(MalformedResponse):
            manager.negotiate('red-mug.jpg', 'image/jpeg', 1)

    def test_target_missing_resource_url(self, config, graphql_session):
        graphql_session.post.return_value = staged_response([
            {'url': 'https://storage.example.com/upload', 'parameters': []}
        ])
        manager = ShopifyStagedUploadManager(config, graphql_session)

        with pytest.raises(MalformedResponse, match='resourceUrl'):
            manager.negotiate('red-mug.jpg', 'image/jpeg', 1)

    def test_parameter_missing_value(self, config, graphql_session):
        graphql_session.post.return_value = staged_response([{
            'url': 'https://storage.example.com/upload',
            'resourceUrl': 'https://cdn/x.jpg',
            'parameters': [{'name': 'key'}]
        }])
        manager = ShopifyStagedUploadManager(config, graphql_session)

        with pytest.raises(MalformedResponse, match='value'):
            manager.negotiate('red-mug.jpg', 'image/jpeg', 1)
