import re

import pytest
from pydantic import ValidationError

from browser_dsl.core.browser import Browser
from browser_dsl.core.errors import (
    JQueryUnavailableError,
    RequiredContentMissingError,
    UnexpectedDialogRaisedError,
    UnexpectedPageError,
    UnknownContentError,
    WaitTimeoutError,
)
from browser_dsl.core.js import JavascriptInterface
from browser_dsl.core.matching import contains, equals
from browser_dsl.core.page import TEXT_SCRIPT, Content, Page
from browser_dsl.core.settings import Settings, WaitPreset
from browser_dsl.core.waiting import WaitingSupport


async def _no_sleep(_seconds: float) -> None:
    return None


def _browser(driver, ctx, **kw) -> Browser:
    cfg = Settings(
        base_url=kw.pop("base_url", "http://app.test/"),
        wait_timeout_seconds=1,
        wait_interval_seconds=0.25,
        wait_presets={"quick": WaitPreset(timeout=0.5, interval=0.25)},
    )
    return Browser(driver, ctx, config=cfg, waiting=WaitingSupport(config=cfg, sleep=_no_sleep))


class LoginPage(Page):
    url = "login"
    content = {
        "username": Content(selector="#username"),
        "banner": Content(selector=".banner", required=False),
        "rows": Content(selector="tr", many=True, required=False),
        "spinner": Content(selector=".spinner", wait=True),
        "toast": Content(selector=".toast", wait="quick", required=False),
    }

    async def at(self) -> bool:
        return await self.title() == "Login"


# ---------------------------------------------------------------- js


@pytest.mark.asyncio
async def test_js_get_and_call_send_arguments(fake_driver, ctx) -> None:
    fake_driver.on_script = lambda source, args: {"args": list(args)}
    js = JavascriptInterface(fake_driver, ctx)

    assert await js.get("app.state.user") == {"args": ["app.state.user"]}
    assert await js.call("app.add", 1, 2) == {"args": ["app.add", [1, 2]]}
    assert await js.exec("return arguments[0] * 2;", 21) == {"args": [21]}
    assert fake_driver.scripts[-1][0] == "return arguments[0] * 2;"


@pytest.mark.asyncio
async def test_jquery(fake_driver, ctx) -> None:
    js = JavascriptInterface(fake_driver, ctx)

    fake_driver.on_script = lambda source, args: {"available": True, "result": "typed"}
    assert await js.jquery("#q", "val") == "typed"
    assert fake_driver.scripts[-1][1] == ("#q", "val", [])

    fake_driver.on_script = lambda source, args: {"available": False}
    with pytest.raises(JQueryUnavailableError):
        await js.jquery("#q", "trigger", "click")


# ---------------------------------------------------------------- pages


def test_page_url_building() -> None:
    assert LoginPage.page_url() == "login"
    assert LoginPage.page_url("admin", 7) == "login/admin/7"
    assert Page.page_url("a", "b") == "a/b"
    assert str(LoginPage(None)) == "LoginPage"


def test_unknown_content(fake_driver, ctx) -> None:
    page = LoginPage(_browser(fake_driver, ctx))
    with pytest.raises(UnknownContentError, match="password"):
        page.content_spec("password")


@pytest.mark.asyncio
async def test_element_resolution(fake_driver, ctx) -> None:
    browser = _browser(fake_driver, ctx)
    page = await browser.to(LoginPage)
    fake_driver.page.elements = {"#username": ["u1", "u2"], "tr": ["r1", "r2"]}

    assert await page.element("username") == "u1"
    assert await page.element("rows") == ["r1", "r2"]
    assert await page.element("banner") is None
    assert await page.present("username") is True
    assert await page.present("banner") is False


@pytest.mark.asyncio
async def test_required_content_missing(fake_driver, ctx) -> None:
    page = await _browser(fake_driver, ctx).to(LoginPage)
    with pytest.raises(RequiredContentMissingError):
        await page.element("username")


@pytest.mark.asyncio
async def test_waiting_content(fake_driver, ctx) -> None:
    page = await _browser(fake_driver, ctx).to(LoginPage)

    with pytest.raises(WaitTimeoutError) as exc:
        await page.element("spinner")
    # default wait 1s / 0.25s -> 1 + 4 evaluations
    assert exc.value.attempts == 5

    fake_driver.present_calls = 0
    assert await page.element("toast") is None
    assert fake_driver.present_calls == 3

    fake_driver.page.elements[".spinner"] = ["s"]
    assert await page.element("spinner") == "s"


@pytest.mark.asyncio
async def test_to_and_at(fake_driver, ctx) -> None:
    browser = _browser(fake_driver, ctx)

    page = await browser.to(LoginPage, "admin", next="/home")
    assert fake_driver.history == ["http://app.test/login/admin?next=%2Fhome"]
    assert browser.page is page

    with pytest.raises(UnexpectedPageError, match="LoginPage"):
        await browser.at(LoginPage)

    fake_driver.page.title = "Login"
    assert isinstance(await browser.at(LoginPage), LoginPage)


def test_resolve_url_without_base(fake_driver, ctx) -> None:
    browser = _browser(fake_driver, ctx, base_url=None)
    assert browser.resolve_url("http://x.test/a", q="1") == "http://x.test/a?q=1"
    assert browser.resolve_url("http://x.test/a?b=2", q="1") == "http://x.test/a?b=2&q=1"


@pytest.mark.asyncio
async def test_browser_delegates_dialogs(fake_driver, ctx) -> None:
    browser = _browser(fake_driver, ctx)
    result = await browser.with_alert(lambda: fake_driver.page.alert("Bang!"))
    assert result.value == "Bang!"
    await browser.with_no_confirm(lambda: None)

    answers = []
    with pytest.raises(UnexpectedDialogRaisedError):
        await browser.with_no_confirm(
            lambda: answers.append(fake_driver.page.confirm("sure?")), ok=False
        )
    assert answers == [False]


# ---------------------------------------------------------------- text matching


class TodoPage(Page):
    url = "todo"
    content = {
        "done": Content(selector="li", text=Page.ends_with("(done)"), many=True, required=False),
        "urgent": Content(selector="li", text=re.compile(r"URGENT: .+")),
        "milk": Content(selector="li", text="Buy milk", required=False),
        "later": Content(selector="li", text=Page.contains("later"), wait=True),
    }


def _texts(fake_driver, texts: dict) -> None:
    fake_driver.on_script = lambda source, args: texts[args[0]] if source == TEXT_SCRIPT else None


def test_content_text_coercion() -> None:
    assert Content(selector="li").text is None
    assert Content(selector="li", text="Buy milk").text == equals("Buy milk")
    assert Content.model_validate(
        {"selector": "li", "text": {"kind": "contains", "value": "milk"}}
    ).text == contains("milk")
    with pytest.raises(ValidationError):
        Content(selector="   ")


@pytest.mark.asyncio
async def test_content_filtered_by_text(fake_driver, ctx) -> None:
    page = await _browser(fake_driver, ctx).to(TodoPage)
    fake_driver.page.elements["li"] = ["a", "b", "c", "d"]
    _texts(
        fake_driver,
        {"a": "  Buy milk \n", "b": "Walk dog (done)", "c": "URGENT: call mom", "d": "Pay rent (done)"},
    )

    assert await page.element("done") == ["b", "d"]
    assert await page.element("urgent") == "c"
    assert await page.element("milk") == "a"
    assert await page.present("milk") is True
    assert await page.present("later") is False
    assert await page.text_of("a") == "Buy milk"

    fake_driver.page.elements["li"] = ["b"]
    assert await page.element("milk") is None
    with pytest.raises(RequiredContentMissingError):
        await page.element("urgent")


@pytest.mark.asyncio
async def test_waiting_for_text_content(fake_driver, ctx) -> None:
    page = await _browser(fake_driver, ctx).to(TodoPage)
    fake_driver.page.elements["li"] = ["a"]
    texts = {"a": "Buy milk", "e": "see you later"}
    _texts(fake_driver, texts)

    with pytest.raises(WaitTimeoutError) as exc:
        await page.element("later")
    assert exc.value.attempts == 5

    fake_driver.page.elements["li"].append("e")
    assert await page.element("later") == "e"


def test_page_exposes_matchers() -> None:
    assert Page.starts_with("Err")("Error: boom")
    assert Page.not_contains("boom")("fine")
    assert not Page.contains_word("log")("catalog")
    assert Page.matches(r"\d+ items")("12 items")
