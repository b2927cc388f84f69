import pytest

from eddy.sanitizer import sanitize_text, sanitize_word

SAMPLES = [
    "A.b.C",
    'Mary had a "little" lamb?',
    "Enter the following command:\n```\necho \"Hello, World!\"\n```",
    "What?! Really?\n\n\n   \n  ...  \nDon't stop!!",
    "lamb ?\n? ! .\n- [x] done.",
    "Café Über, naïve résumé.",
    "",
]


class TestSanitizeText:

    def test_strips_inner_punctuation(self):
        assert sanitize_text("A.b.C") == "abc"

    def test_keeps_terminal_mark_of_last_word(self):
        assert sanitize_text('Mary had a "little" lamb?') == "mary had a little lamb?"

    def test_multiline_drops_code_fences(self):
        text = "Enter the following command:\n```\necho \"Hello, World!\"\n```"
        assert sanitize_text(text) == "enter the following command\necho hello world"

    def test_indented_block_with_blank_lines(self):
        text = """
            This is an example of text with a:

            ```
            code block
            ```
        """
        assert sanitize_text(text) == "this is an example of text with a\ncode block"

    def test_contractions_lose_apostrophe(self):
        assert sanitize_text("Don't") == "dont"

    def test_mark_inside_line_is_removed(self):
        assert sanitize_text("What?! Really?") == "what really?"

    def test_only_last_mark_survives(self):
        assert sanitize_text("stop?!") == "stop!"

    def test_pure_punctuation_line_vanishes(self):
        assert sanitize_text("first\n... ?!\nsecond") == "first\nsecond"

    def test_detached_mark_is_dropped(self):
        assert sanitize_text("lamb ?") == "lamb"

    def test_unicode_letters_are_kept(self):
        assert sanitize_text("Café Über") == "café über"

    def test_empty_input(self):
        assert sanitize_text("") == ""
        assert sanitize_text("\n  \n\t\n") == ""

    @pytest.mark.parametrize("text", SAMPLES)
    def test_idempotent(self, text):
        once = sanitize_text(text)
        assert sanitize_text(once) == once

    @pytest.mark.parametrize("text", SAMPLES)
    def test_no_empty_lines(self, text):
        out = sanitize_text(text)
        if out:
            assert all(line.strip() for line in out.split("\n"))
        assert not out.startswith("\n") and not out.endswith("\n")

    @pytest.mark.parametrize("text", SAMPLES)
    def test_marks_only_end_lines(self, text):
        for line in sanitize_text(text).split("\n"):
            body = line[:-1] if line and line[-1] in ".?!" else line
            assert not any(c in ".?!" for c in body)


class TestSanitizeWord:

    def test_drops_mark_unless_preserved(self):
        assert sanitize_word("end.") == "end"
        assert sanitize_word("end.", preserve_end_mark=True) == "end."

    def test_mark_must_be_last_character(self):
        assert sanitize_word('end."', preserve_end_mark=True) == "end"

    def test_bare_mark_is_empty(self):
        assert sanitize_word("?", preserve_end_mark=True) == ""


class TestLineBreaks:

    def test_crlf_ends_lines(self):
        assert sanitize_text("First line.\r\nSecond line!\r\n") == "first line.\nsecond line!"

    def test_form_feed_stays_inside_the_line(self):
        assert sanitize_text("stop! go\x0cnow.") == "stop go now."

    def test_unicode_separators_stay_inside_the_line(self):
        assert sanitize_text("wait? here there\x85again") == "wait here there again"
