from pathlib import Path

from streamlit.testing.v1 import AppTest

APP = str(Path(__file__).resolve().parent.parent / "streamlit_app.py")


def test_transcript_fills_composer_and_clear_empties_it():
    at = AppTest.from_file(APP, default_timeout=30)
    at.run()
    assert not at.exception

    at.text_input(key="transcript").set_value("how do I")
    at.button(key="add-transcript").click()
    at.run()
    at.text_input(key="transcript").set_value("prevent STIs")
    at.button(key="add-transcript").click()
    at.run()

    store = at.session_state["store"]
    assert store.input_buffer == "how do I prevent STIs"
    assert at.text_area(key="composer").value == "how do I prevent STIs"
    assert len(store.turns) == 1

    at.button(key="clear-composer").click()
    at.run()

    assert store.input_buffer == ""
    assert at.text_area(key="composer").value == ""
    assert len(store.turns) == 1


def test_send_with_blank_composer_adds_no_turn():
    at = AppTest.from_file(APP, default_timeout=30)
    at.run()

    at.button(key="send-composer").click()
    at.run()

    assert not at.exception
    assert len(at.session_state["store"].turns) == 1
