"""Tests for action values and the executor."""

import asyncio

from zara.actions import ActionExecutor, speak, speak_then_open


def test_open_happens_after_speech(events, speaker, opener):
    executor = ActionExecutor(speaker, opener)
    asyncio.run(executor.execute(speak_then_open("search", "Searching for cats", "https://example.com/?q=cats")))
    assert events == ["speak:Searching for cats", "open:https://example.com/?q=cats"]


def test_speak_only_action_opens_nothing(events, speaker, opener):
    asyncio.run(ActionExecutor(speaker, opener).execute(speak("identity", "I'm Zara")))
    assert opener.opened == []
    assert speaker.spoken == ["I'm Zara"]


def test_to_dict():
    assert speak_then_open("applications", "Opening Google...", "https://google.com").to_dict() == {
        "intent": "applications",
        "speech": "Opening Google...",
        "open_url": "https://google.com",
    }


def test_browser_opener_uses_new_tab(monkeypatch):
    import webbrowser

    from zara.opener import BrowserOpener

    opened = []
    monkeypatch.setattr(webbrowser, "open_new_tab", lambda url: opened.append(url) or True)
    BrowserOpener().open("https://youtube.com")
    assert opened == ["https://youtube.com"]


def test_follow_up_dropped_when_reply_interrupted(events, speaker, opener):
    executor = ActionExecutor(speaker, opener)
    action = speak_then_open("applications", "Opening YouTube...", "https://youtube.com")
    asyncio.run(executor.execute(action, proceed=lambda: False))
    assert speaker.spoken == ["Opening YouTube..."]
    assert opener.opened == []
