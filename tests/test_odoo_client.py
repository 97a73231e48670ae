"""
Tests for the XML-RPC client.

requests.post is patched and answers with real XML-RPC documents, so the
marshalling on both sides is exercised.
"""

import xmlrpc.client
from unittest.mock import Mock, patch

import pytest
import requests

from src.api.errors import ConfigurationError, ErpAuthenticationError, ErpIntegrationError
from src.erp_integration import OdooClient, OdooSession


def xmlrpc_response(value):
    response = Mock()
    response.content = xmlrpc.client.dumps((value,), methodresponse=True, allow_none=True).encode('utf-8')
    response.raise_for_status = Mock()
    return response


def xmlrpc_fault(code, message):
    response = Mock()
    response.content = xmlrpc.client.dumps(xmlrpc.client.Fault(code, message), methodresponse=True).encode('utf-8')
    response.raise_for_status = Mock()
    return response


def sent_call(post_mock, index=0):
    """(method name, params) of the index-th posted request."""
    body = post_mock.call_args_list[index].kwargs['data']
    params, method = xmlrpc.client.loads(body)
    return method, params


@pytest.fixture
def odoo():
    return OdooClient('https://odoo.test/', 'testdb', 'api@test', 'secret', timeout=5)


# ===== CONSTRUCTION =====

class TestFromConfig:

    def test_builds_client_from_config(self, config):
        client = OdooClient.from_config(config)
        assert client.base_url == 'https://odoo.test'
        assert client.common_url == 'https://odoo.test/xmlrpc/2/common'
        assert client.object_url == 'https://odoo.test/xmlrpc/2/object'
        assert client.is_secure

    def test_missing_settings_are_listed(self, config):
        config.ODOO_URL = ''
        config.ODOO_PASSWORD = ''
        with pytest.raises(ConfigurationError) as exc_info:
            OdooClient.from_config(config)
        assert 'ODOO_URL' in exc_info.value.message
        assert 'ODOO_PASSWORD' in exc_info.value.message
        assert 'ODOO_DB' not in exc_info.value.message

    def test_plain_http_is_not_secure(self):
        assert not OdooClient('http://localhost:8069', 'db', 'u', 'p').is_secure


# ===== AUTHENTICATION =====

class TestAuthenticate:

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_returns_uid(self, post, odoo):
        post.return_value = xmlrpc_response(2)

        assert odoo.authenticate() == 2

        method, params = sent_call(post)
        assert method == 'authenticate'
        assert params == ('testdb', 'api@test', 'secret', {})
        assert post.call_args.args[0] == 'https://odoo.test/xmlrpc/2/common'
        assert post.call_args.kwargs['timeout'] == 5

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_false_uid_is_an_authentication_error(self, post, odoo):
        post.return_value = xmlrpc_response(False)

        with pytest.raises(ErpAuthenticationError) as exc_info:
            odoo.authenticate()
        assert 'No UID returned' in exc_info.value.message

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_open_session_authenticates_once(self, post, odoo):
        post.side_effect = [xmlrpc_response(2), xmlrpc_response([]), xmlrpc_response([])]

        session = odoo.open_session()
        session.search_read('res.partner', [('ref', '=', 'X')], ['id'])
        session.search_read('res.partner', [('ref', '=', 'Y')], ['id'])

        assert isinstance(session, OdooSession)
        assert session.uid == 2
        methods = [sent_call(post, i)[0] for i in range(post.call_count)]
        assert methods == ['authenticate', 'execute_kw', 'execute_kw']

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_check_connection_reports_target(self, post, odoo):
        post.return_value = xmlrpc_response(5)
        assert odoo.check_connection() == {"url": "https://odoo.test", "db": "testdb", "uid": 5}


# ===== OBJECT CALLS =====

class TestSearchRead:

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_execute_kw_payload(self, post, odoo):
        post.return_value = xmlrpc_response([{"id": 7, "name": "Acme Ltd"}])
        session = OdooSession(odoo, 2)

        records = session.search_read('res.partner', [('ref', '=', 'CUST001')], ['id', 'name'], limit=1)

        assert records == [{"id": 7, "name": "Acme Ltd"}]
        method, params = sent_call(post)
        assert method == 'execute_kw'
        assert params == ('testdb', 2, 'secret', 'res.partner', 'search_read',
                          [[['ref', '=', 'CUST001']]], {'fields': ['id', 'name'], 'limit': 1})
        assert post.call_args.args[0] == 'https://odoo.test/xmlrpc/2/object'

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_limit_is_omitted_when_not_given(self, post, odoo):
        post.return_value = xmlrpc_response([])
        OdooSession(odoo, 2).search_read('account.move', [], ['id'])
        _, params = sent_call(post)
        assert params[-1] == {'fields': ['id']}

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_false_result_becomes_empty_list(self, post, odoo):
        post.return_value = xmlrpc_response(False)
        assert OdooSession(odoo, 2).search_read('account.move', [], ['id']) == []


# ===== FAILURES =====

class TestFailures:

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_fault_carries_fault_string(self, post, odoo):
        post.return_value = xmlrpc_fault(1, "Invalid field 'foo' on model 'account.move'")

        with pytest.raises(ErpIntegrationError) as exc_info:
            OdooSession(odoo, 2).search_read('account.move', [('foo', '=', 1)], ['id'])
        assert exc_info.value.message == "Invalid field 'foo' on model 'account.move'"

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_http_error(self, post, odoo):
        response = Mock()
        response.status_code = 503
        failing = Mock()
        failing.raise_for_status.side_effect = requests.exceptions.HTTPError("503 Server Error", response=response)
        post.return_value = failing

        with pytest.raises(ErpIntegrationError) as exc_info:
            odoo.authenticate()
        assert '503' in exc_info.value.message

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_network_error(self, post, odoo):
        post.side_effect = requests.exceptions.ConnectionError("connection refused")

        with pytest.raises(ErpIntegrationError) as exc_info:
            odoo.authenticate()
        assert 'Network error' in exc_info.value.message

    @patch('src.erp_integration.odoo_client.requests.post')
    def test_non_xml_body(self, post, odoo):
        response = Mock()
        response.content = b'<html>Bad gateway</html'
        response.raise_for_status = Mock()
        post.return_value = response

        with pytest.raises(ErpIntegrationError):
            odoo.authenticate()
