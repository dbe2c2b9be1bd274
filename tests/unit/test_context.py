from keyward.context import SessionContext
from keyward.models import OPAQUE_PUBLIC_KEY


def test_logs_are_newest_first_and_pushed_to_subscribers() -> None:
    context = SessionContext()
    received = []
    context.subscribe_logs(received.append)
    context.log("first")
    context.log("second")
    assert context.logs == ("second", "first")
    assert received == ["first", "second"]

    context.clear_logs()
    assert context.logs == ()


def test_public_key_publication_is_last_write_wins() -> None:
    context = SessionContext()
    seen = []
    unsubscribe = context.subscribe_public_key(seen.append)
    context.publish_public_key("abc")
    context.publish_public_key(OPAQUE_PUBLIC_KEY)
    unsubscribe()
    context.publish_public_key(None)
    assert seen == ["abc", OPAQUE_PUBLIC_KEY]
    assert context.public_key is None
    assert OPAQUE_PUBLIC_KEY is not None


def test_close_drops_subscribers() -> None:
    context = SessionContext(session_id="s1")
    received = []
    context.subscribe_logs(received.append)
    context.publish_public_key("abc")
    context.close()
    context.log("after close")
    assert context.closed
    assert received == []
    assert context.logs == ()
    assert context.public_key is None
    assert context.session_id == "s1"
