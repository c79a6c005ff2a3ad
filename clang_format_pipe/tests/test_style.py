#!/usr/bin/env python3

import pytest

from clang_format_pipe.style import ClangFormatStyle, CustomStyle, parse_style


class TestPresets:
    """Preset styles render to the names clang-format expects"""

    @pytest.mark.parametrize(
        "style,expected",
        [
            (ClangFormatStyle.CHROMIUM, "Chromium"),
            (ClangFormatStyle.DEFAULT, "{}"),
            (ClangFormatStyle.FILE, "file"),
            (ClangFormatStyle.GNU, "GNU"),
            (ClangFormatStyle.GOOGLE, "Google"),
            (ClangFormatStyle.LLVM, "LLVM"),
            (ClangFormatStyle.MICROSOFT, "Microsoft"),
            (ClangFormatStyle.MOZILLA, "Mozilla"),
            (ClangFormatStyle.WEBKIT, "WebKit"),
        ],
    )
    def test_to_argument(self, style, expected):
        assert style.to_argument() == expected

    def test_to_argument_is_deterministic(self):
        for style in ClangFormatStyle:
            assert style.to_argument() == style.to_argument()


class TestCustomStyle:
    def test_passes_text_through(self):
        text = "{ BasedOnStyle: \"Mozilla\", IndentWidth: 4 }"
        assert CustomStyle(text).to_argument() == text

    def test_keeps_newlines_and_single_quotes(self):
        text = "{BasedOnStyle: 'Mozilla',\n                    IndentWidth: 8}"
        assert CustomStyle(text).to_argument() == text

    def test_structural_equality(self):
        assert CustomStyle("{IndentWidth: 2}") == CustomStyle("{IndentWidth: 2}")
        assert CustomStyle("{IndentWidth: 2}") != CustomStyle("{IndentWidth: 3}")
        assert hash(CustomStyle("x")) == hash(CustomStyle("x"))

    def test_is_immutable(self):
        style = CustomStyle("{}")
        with pytest.raises(AttributeError):
            style.value = "file"

    def test_from_options(self):
        style = CustomStyle.from_options({"BasedOnStyle": "Mozilla", "IndentWidth": 8})
        assert style.to_argument() == "{BasedOnStyle: Mozilla, IndentWidth: 8}"

    def test_from_options_booleans(self):
        style = CustomStyle.from_options({"SortIncludes": False, "UseTab": True})
        assert style.to_argument() == "{SortIncludes: false, UseTab: true}"

    def test_from_options_quotes_special_strings(self):
        style = CustomStyle.from_options({"CommentPragmas": "^ IWYU: pragma", "MacroBlockBegin": "it's"})
        assert style.to_argument() == "{CommentPragmas: '^ IWYU: pragma', MacroBlockBegin: 'it''s'}"

    @pytest.mark.parametrize("value", ["true", "False", "null", "~", "yes", "off", "1.5", "42", "-3", "0x1F", ".inf"])
    def test_from_options_quotes_strings_that_read_as_other_types(self, value):
        assert CustomStyle.from_options({"MacroBlockEnd": value}).to_argument() == f"{{MacroBlockEnd: '{value}'}}"

    def test_from_options_quotes_leading_indicator(self):
        assert CustomStyle.from_options({"MacroBlockEnd": "-end"}).to_argument() == "{MacroBlockEnd: '-end'}"

    def test_from_options_keeps_plain_words(self):
        assert CustomStyle.from_options({"Language": "Cpp", "Standard": "c++17"}).to_argument() == "{Language: Cpp, Standard: c++17}"

    @pytest.mark.parametrize("value", [["a", "b"], {"Regex": ".*"}, None, ("x",)])
    def test_from_options_rejects_non_scalars(self, value):
        with pytest.raises(ValueError, match="must be scalars"):
            CustomStyle.from_options({"IncludeCategories": value})

    def test_from_options_empty(self):
        assert CustomStyle.from_options({}).to_argument() == "{}"


class TestParseStyle:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("mozilla", ClangFormatStyle.MOZILLA),
            ("Mozilla", ClangFormatStyle.MOZILLA),
            ("WEBKIT", ClangFormatStyle.WEBKIT),
            ("llvm", ClangFormatStyle.LLVM),
            ("default", ClangFormatStyle.DEFAULT),
            ("{}", ClangFormatStyle.DEFAULT),
            ("file", ClangFormatStyle.FILE),
            (" Google ", ClangFormatStyle.GOOGLE),
        ],
    )
    def test_presets(self, text, expected):
        assert parse_style(text) is expected

    def test_custom_fallback(self):
        assert parse_style("{BasedOnStyle: LLVM, ColumnLimit: 120}") == CustomStyle("{BasedOnStyle: LLVM, ColumnLimit: 120}")


if __name__ == "__main__":
    pytest.main([__file__])
