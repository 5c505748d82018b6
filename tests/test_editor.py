"""Tests for the keypad editor: digit buffer rules and the dialog."""

import pytest

from timerwidget.ui.editor import EditorDialog, KeypadInput
from timerwidget.ui.styles import PALETTE

from helpers import SignalCollector


# ═══════════════════════════════════════════════════════════════════════
#  KEYPAD INPUT
# ═══════════════════════════════════════════════════════════════════════


class TestKeypadInput:

    def test_empty_is_zero(self):
        k = KeypadInput()
        assert k.total_seconds == 0
        assert k.display == "00:00:00"
        assert k.can_start is False

    def test_nine_seconds_keeps_start_disabled(self):
        k = KeypadInput("0009")
        assert k.total_seconds == 9
        assert k.can_start is False

    def test_ten_seconds_enables_start(self):
        k = KeypadInput("000010")
        assert k.total_seconds == 10
        assert k.can_start is True

    def test_digits_fill_from_the_right(self):
        k = KeypadInput("130")
        assert k.display == "00:01:30"
        assert k.total_seconds == 90

    def test_full_hms(self):
        k = KeypadInput("012345")
        assert k.total_seconds == 1 * 3600 + 23 * 60 + 45

    def test_unnormalised_fields_still_sum(self):
        # "99" seconds is accepted as typed
        k = KeypadInput("99")
        assert k.total_seconds == 99
        assert k.display == "00:00:99"

    def test_caps_at_six_digits(self):
        k = KeypadInput("123456")
        assert k.press_digit("7") is False
        assert k.digits == "123456"

    def test_backspace_removes_last_digit(self):
        k = KeypadInput("125")
        k.backspace()
        assert k.digits == "12"
        assert k.total_seconds == 12

    def test_backspace_on_empty_is_harmless(self):
        k = KeypadInput()
        k.backspace()
        assert k.digits == ""

    def test_clear(self):
        k = KeypadInput("500")
        k.clear()
        assert k.total_seconds == 0

    def test_entered_positions(self):
        assert KeypadInput("12").entered_positions == 2

    @pytest.mark.parametrize("bad", ["a", "", "12", "-"])
    def test_rejects_non_digits(self, bad):
        with pytest.raises(ValueError):
            KeypadInput().press_digit(bad)


# ═══════════════════════════════════════════════════════════════════════
#  DIALOG
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestEditorDialog:

    def test_start_disabled_initially(self):
        dlg = EditorDialog()
        assert dlg._start_btn.isEnabled() is False

    def test_start_enables_at_ten_seconds(self):
        dlg = EditorDialog()
        for key in "9":
            dlg.press(key)
        assert dlg._start_btn.isEnabled() is False
        dlg.press("DEL")
        for key in "10":
            dlg.press(key)
        assert dlg._start_btn.isEnabled() is True

    def test_start_emits_total_seconds(self):
        dlg = EditorDialog()
        c = SignalCollector()
        dlg.timer_requested.connect(c)
        for key in "130":
            dlg.press(key)
        dlg._start_btn.click()
        assert c.last == 90

    def test_disabled_start_emits_nothing(self):
        dlg = EditorDialog()
        c = SignalCollector()
        dlg.timer_requested.connect(c)
        dlg.press("5")
        dlg._on_start()
        assert len(c) == 0

    def test_keypad_buttons_feed_input(self):
        dlg = EditorDialog()
        dlg._keys["4"].click()
        dlg._keys["5"].click()
        assert dlg.keypad.digits == "45"
        dlg._keys["DEL"].click()
        assert dlg.keypad.digits == "4"

    def test_display_shows_digits(self):
        dlg = EditorDialog()
        dlg.press("7")
        assert "7" in dlg._display.text()

    def test_padding_digits_use_muted_colour(self):
        dlg = EditorDialog()
        dlg.press("7")
        text = dlg._display.text()
        assert text.count(f'color:{PALETTE["text_muted"]}') == 5
        assert text.endswith("7")
