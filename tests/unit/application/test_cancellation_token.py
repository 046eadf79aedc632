import pytest

from py_bankclient.application.cancellation import CancellationToken, OperationCancelled, raise_if_cancelled


def test_token_is_one_way() -> None:
    token = CancellationToken()
    assert not token.cancelled
    token.cancel()
    token.cancel()
    assert token.cancelled
    assert "cancelled=True" in repr(token)


def test_raise_if_cancelled() -> None:
    raise_if_cancelled(None)
    token = CancellationToken()
    raise_if_cancelled(token)
    token.cancel()
    with pytest.raises(OperationCancelled):
        raise_if_cancelled(token)
