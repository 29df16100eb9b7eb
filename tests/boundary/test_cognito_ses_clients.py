"""
Test suite for the Cognito admin client and the SES client.

System role: Verification of user pool and email boundary access
"""

from unittest.mock import MagicMock

import pytest

from contract_engine.boundary.aws.cognito_client import CognitoAdminClient, attributes_to_dict
from contract_engine.boundary.aws.ses_client import SesEmailClient
from contract_engine.core.exceptions import AwsServiceError


@pytest.fixture
def boto_cognito() -> MagicMock:
    return MagicMock()


@pytest.fixture
def cognito(boto_cognito: MagicMock) -> CognitoAdminClient:
    return CognitoAdminClient("us-east-2_pool", client=boto_cognito)


class TestCognitoAdminClient:
    def test_attributes_to_dict(self) -> None:
        assert attributes_to_dict([{"Name": "email", "Value": "a@b.com"}, {"Name": "sub"}]) == {
            "email": "a@b.com",
            "sub": "",
        }
        assert attributes_to_dict(None) == {}

    def test_list_users_paginates(self, cognito: CognitoAdminClient, boto_cognito: MagicMock) -> None:
        boto_cognito.list_users.side_effect = [
            {"Users": [{"Username": "a"}], "PaginationToken": "t"},
            {"Users": [{"Username": "b"}]},
        ]

        users = cognito.list_users()

        assert [u["Username"] for u in users] == ["a", "b"]
        assert boto_cognito.list_users.call_args_list[1].kwargs["PaginationToken"] == "t"

    def test_create_user_suppresses_invite(self, cognito: CognitoAdminClient, boto_cognito: MagicMock) -> None:
        boto_cognito.admin_create_user.return_value = {"User": {"Username": "alice"}}

        cognito.create_user("alice", "alice@example.com", "Temp#1234", {"given_name": "Alice", "family_name": ""})

        kwargs = boto_cognito.admin_create_user.call_args.kwargs
        assert kwargs["MessageAction"] == "SUPPRESS"
        assert {"Name": "email_verified", "Value": "true"} in kwargs["UserAttributes"]
        assert {"Name": "given_name", "Value": "Alice"} in kwargs["UserAttributes"]
        assert all(attr["Name"] != "family_name" for attr in kwargs["UserAttributes"])

    def test_list_groups_for_user(self, cognito: CognitoAdminClient, boto_cognito: MagicMock) -> None:
        boto_cognito.admin_list_groups_for_user.return_value = {"Groups": [{"GroupName": "Admin"}]}
        assert cognito.list_groups_for_user("alice") == ["Admin"]

    def test_set_password(self, cognito: CognitoAdminClient, boto_cognito: MagicMock) -> None:
        cognito.set_user_password("alice", "Temp#1234")

        boto_cognito.admin_set_user_password.assert_called_once_with(
            UserPoolId="us-east-2_pool",
            Username="alice",
            Password="Temp#1234",
            Permanent=False,
        )

    def test_user_not_found(self, cognito: CognitoAdminClient, boto_cognito: MagicMock, client_error) -> None:
        boto_cognito.admin_get_user.side_effect = client_error("UserNotFoundException", "AdminGetUser")

        with pytest.raises(AwsServiceError) as exc_info:
            cognito.get_user("ghost")

        assert exc_info.value.code == "UserNotFoundException"
        assert exc_info.value.service == "cognito-idp"
        assert exc_info.value.hints


class TestSesEmailClient:
    @pytest.fixture
    def boto_ses(self) -> MagicMock:
        client = MagicMock()
        client.send_email.return_value = {"MessageId": "msg-1"}
        return client

    def test_send_email(self, boto_ses: MagicMock) -> None:
        ses = SesEmailClient("noreply@example.com", client=boto_ses)

        message_id = ses.send_email("a@example.com", "Hi", "<p>Hi</p>", text_body="Hi", reply_to=["r@example.com"])

        assert message_id == "msg-1"
        kwargs = boto_ses.send_email.call_args.kwargs
        assert kwargs["Source"] == "noreply@example.com"
        assert kwargs["Destination"] == {"ToAddresses": ["a@example.com"]}
        assert kwargs["Message"]["Body"]["Text"]["Data"] == "Hi"
        assert kwargs["ReplyToAddresses"] == ["r@example.com"]

    def test_html_only(self, boto_ses: MagicMock) -> None:
        SesEmailClient("noreply@example.com", client=boto_ses).send_email(["a@x.com", "b@x.com"], "S", "<p/>")

        kwargs = boto_ses.send_email.call_args.kwargs
        assert "Text" not in kwargs["Message"]["Body"]
        assert "ReplyToAddresses" not in kwargs

    def test_send_quota(self, boto_ses: MagicMock) -> None:
        boto_ses.get_send_quota.return_value = {"Max24HourSend": 200.0, "MaxSendRate": 1.0, "SentLast24Hours": 3.0}

        quota = SesEmailClient("noreply@example.com", client=boto_ses).get_send_quota()

        assert quota == {"max_24_hour_send": 200.0, "max_send_rate": 1.0, "sent_last_24_hours": 3.0}

    def test_verification_status_defaults(self, boto_ses: MagicMock) -> None:
        boto_ses.get_identity_verification_attributes.return_value = {
            "VerificationAttributes": {"a@x.com": {"VerificationStatus": "Success"}}
        }

        status = SesEmailClient("a@x.com", client=boto_ses).get_identity_verification_status(["a@x.com", "b@x.com"])

        assert status == {"a@x.com": "Success", "b@x.com": "NotStarted"}

    def test_message_rejected(self, boto_ses: MagicMock, client_error) -> None:
        boto_ses.send_email.side_effect = client_error("MessageRejected", "SendEmail", "Email address is not verified")

        with pytest.raises(AwsServiceError) as exc_info:
            SesEmailClient("noreply@example.com", client=boto_ses).send_email("a@x.com", "S", "<p/>")

        assert exc_info.value.code == "MessageRejected"
        assert "not verified" in exc_info.value.message
