import pytest

from browser_dsl.core import dialogs
from browser_dsl.core.dialogs import Captured, DialogInterceptor, NavigatedAway
from browser_dsl.core.errors import (
    ExpectedDialogNotRaisedError,
    NestedDialogInterceptionError,
    UnexpectedDialogRaisedError,
)


def _sources(driver) -> list[str]:
    return [src for src, _args in driver.scripts]


@pytest.mark.asyncio
async def test_with_alert_returns_message(fake_driver, ctx) -> None:
    interceptor = DialogInterceptor(fake_driver, ctx)

    result = await interceptor.with_alert(lambda: fake_driver.page.alert("Bang!"))

    assert result == Captured("Bang!")
    assert result.value == "Bang!"
    assert fake_driver.page.native_dialogs == []
    assert fake_driver.page.dialog_slot is None
    assert _sources(fake_driver) == [
        dialogs.INSTALL_SCRIPT,
        dialogs.VERIFY_SCRIPT,
        dialogs.RESTORE_SCRIPT,
    ]


@pytest.mark.asyncio
async def test_with_alert_accepts_async_actions(fake_driver, ctx) -> None:
    async def actions():
        await fake_driver.click(ctx, "#bang")
        fake_driver.page.alert("from click")

    result = await DialogInterceptor(fake_driver, ctx).with_alert(actions)
    assert result == Captured("from click")
    assert fake_driver.clicks == ["#bang"]


@pytest.mark.asyncio
async def test_with_alert_without_alert_fails(fake_driver, ctx) -> None:
    with pytest.raises(ExpectedDialogNotRaisedError) as exc:
        await DialogInterceptor(fake_driver, ctx).with_alert(lambda: None)
    assert exc.value.kind == "alert"
    assert fake_driver.page.dialog_slot is None


@pytest.mark.asyncio
async def test_with_alert_ignores_confirm(fake_driver, ctx) -> None:
    with pytest.raises(ExpectedDialogNotRaisedError):
        await DialogInterceptor(fake_driver, ctx).with_alert(
            lambda: fake_driver.page.confirm("sure?")
        )
    assert fake_driver.page.native_dialogs == [("confirm", "sure?")]


@pytest.mark.asyncio
async def test_with_no_alert(fake_driver, ctx) -> None:
    interceptor = DialogInterceptor(fake_driver, ctx)
    assert await interceptor.with_no_alert(lambda: None) is None

    with pytest.raises(UnexpectedDialogRaisedError) as exc:
        await interceptor.with_no_alert(lambda: fake_driver.page.alert("oops"))
    assert exc.value.dialog_message == "oops"
    assert fake_driver.page.dialog_slot is None


@pytest.mark.parametrize("ok", [True, False])
@pytest.mark.asyncio
async def test_with_confirm_answers_page_and_returns_message(fake_driver, ctx, ok) -> None:
    seen = []

    def actions():
        seen.append(fake_driver.page.confirm("Delete?"))

    result = await DialogInterceptor(fake_driver, ctx).with_confirm(actions, ok=ok)

    assert seen == [ok]
    assert result == Captured("Delete?")


@pytest.mark.asyncio
async def test_with_no_confirm(fake_driver, ctx) -> None:
    interceptor = DialogInterceptor(fake_driver, ctx)
    await interceptor.with_no_confirm(lambda: fake_driver.page.alert("not a confirm"))

    with pytest.raises(UnexpectedDialogRaisedError):
        await interceptor.with_no_confirm(lambda: fake_driver.page.confirm("sure?"))


@pytest.mark.asyncio
async def test_navigation_yields_navigated_away(fake_driver, ctx) -> None:
    interceptor = DialogInterceptor(fake_driver, ctx)

    def fire_then_leave():
        fake_driver.page.alert("lost")
        fake_driver.navigate("http://example.test/next")

    result = await interceptor.with_alert(fire_then_leave)
    assert isinstance(result, NavigatedAway)
    assert result.value is True

    result = await interceptor.with_confirm(lambda: fake_driver.navigate("http://example.test/b"))
    assert isinstance(result, NavigatedAway)

    # no restore on the new page
    assert _sources(fake_driver)[-1] == dialogs.VERIFY_SCRIPT


@pytest.mark.asyncio
async def test_no_dialog_checks_pass_on_navigation(fake_driver, ctx) -> None:
    interceptor = DialogInterceptor(fake_driver, ctx)

    def alert_then_leave():
        fake_driver.page.alert("unknowable")
        fake_driver.navigate("http://example.test/other")

    await interceptor.with_no_alert(alert_then_leave)
    await interceptor.with_no_confirm(lambda: fake_driver.navigate("http://example.test/x"))


@pytest.mark.asyncio
async def test_last_dialog_message_wins(fake_driver, ctx) -> None:
    def twice():
        fake_driver.page.alert("first")
        fake_driver.page.alert("second")

    assert await DialogInterceptor(fake_driver, ctx).with_alert(twice) == Captured("second")


@pytest.mark.asyncio
async def test_actions_error_restores_and_propagates(fake_driver, ctx) -> None:
    def broken():
        raise LookupError("no such element")

    with pytest.raises(LookupError, match="no such element"):
        await DialogInterceptor(fake_driver, ctx).with_alert(broken)
    assert fake_driver.page.dialog_slot is None
    assert _sources(fake_driver)[-1] == dialogs.RESTORE_SCRIPT


@pytest.mark.asyncio
async def test_interception_is_not_nestable(fake_driver, ctx) -> None:
    outer = DialogInterceptor(fake_driver, ctx)
    inner = DialogInterceptor(fake_driver, ctx)

    async def nested():
        await inner.with_alert(lambda: fake_driver.page.alert("inner"))

    with pytest.raises(NestedDialogInterceptionError):
        await outer.with_alert(nested)
    # the outer session cleaned up after itself
    assert fake_driver.page.dialog_slot is None


@pytest.mark.asyncio
async def test_driver_errors_pass_through(fake_driver, ctx) -> None:
    class ScriptFailure(Exception):
        pass

    async def failing(ctx, source, *args):
        raise ScriptFailure("page crashed")

    fake_driver.execute_script = failing
    with pytest.raises(ScriptFailure):
        await DialogInterceptor(fake_driver, ctx).with_alert(lambda: None)
