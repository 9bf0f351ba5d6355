# tests/test_app.py
from streamlit.testing.v1 import AppTest


def test_main_renders_without_errors():
    at = AppTest.from_file("../main.py", default_timeout=30)
    at.run()
    assert not at.exception
    assert at.tabs[0].label == "Activity"


def test_browser_sessions_share_one_store():
    first = AppTest.from_file("../main.py", default_timeout=30)
    second = AppTest.from_file("../main.py", default_timeout=30)
    first.run()
    second.run()
    assert first.session_state["session"] is not second.session_state["session"]
    assert first.session_state["session"].store is second.session_state["session"].store
