"""End-to-end tests for the Translator facade."""

import pytest
from cs_clojure import (
    Translator, translate,
    TranslationError, ScanError, ParseError, UnrecognizedCharacter,
    MissingNamespace, UnterminatedScope, UnparsableExpression, UnsupportedSyntax,
)


IF_ELSE = "namespace N { int F(int x) { if (x == 1) { return 1; } else { return 2; } } }"


class TestTranslate:
    def test_minimal(self):
        assert translate("namespace N { int F() { return 1; } }") == \
            "(ns N)\n\n(defn F [] 1)\n\n"

    def test_empty_namespace(self):
        assert translate("namespace N { }") == "(ns N)\n\n"

    def test_null_is_nil(self):
        assert translate("namespace N { int F() { return null; } }") == \
            "(ns N)\n\n(defn F [] nil)\n\n"

    def test_let_body(self):
        source = "namespace N { int F(int a) { x = 1; return x + a; } }"
        assert translate(source) == (
            "(ns N)\n\n"
            "(defn F [a]\n"
            "    (let [x 1]\n"
            "        (+ x a)))\n\n"
        )

    def test_if_else(self):
        assert translate(IF_ELSE) == (
            "(ns N)\n\n"
            "(defn F [x]\n"
            "    (if (= x 1)\n"
            "        1\n"
            "        2))\n\n"
        )

    def test_grouped_let(self):
        source = "namespace N { int F(int a) { x = 1; y = 2; return x + y + a; } }"
        assert translate(source) == (
            "(ns N)\n\n"
            "(defn F [a]\n"
            "    (let [x 1\n"
            "          y 2]\n"
            "        (+ x (+ y a))))\n\n"
        )

    def test_comment_ends_method(self):
        assert translate("namespace N { int F() { return 1; // done\n } }") == (
            "(ns N)\n\n"
            "(defn F []\n"
            "    1\n"
            "    ;; done\n"
            ")\n\n"
        )

    def test_comment_only_method(self):
        assert translate("namespace N { int F() { // todo\n } }") == \
            "(ns N)\n\n(defn F []\n    ;; todo\n)\n\n"

    def test_comment_ends_do_block(self):
        source = ("namespace N { int F(int a) { if (a == 1) { return 1; // one\n }"
                  " else { return 2; } } }")
        assert translate(source) == (
            "(ns N)\n\n"
            "(defn F [a]\n"
            "    (if (= a 1)\n"
            "        (do \n"
            "            1\n"
            "            ;; one\n"
            "        )\n"
            "        2))\n\n"
        )

    def test_unary_minus_operand(self):
        source = "namespace N { int F(int a, int b) { return -a + b; } }"
        assert translate(source) == "(ns N)\n\n(defn F [a b] (+ (- a) b))\n\n"

    def test_grouped_let_two_space_indent(self):
        source = "namespace N { int F(int a) { x = 1; y = 2; return x + y + a; } }"
        assert translate(source, " ", 2) == (
            "(ns N)\n\n"
            "(defn F [a]\n"
            "  (let [x 1\n"
            "        y 2]\n"
            "    (+ x (+ y a))))\n\n"
        )

    def test_output_starts_with_ns(self):
        assert translate("namespace Shapes; Draw();").startswith("(ns Shapes)")

    def test_balanced(self):
        text = translate(IF_ELSE)
        assert text.count("(") == text.count(")")


class TestTranslator:
    def test_tab_indent(self):
        t = Translator("\t", 1)
        assert t.translate(IF_ELSE) == (
            "(ns N)\n\n"
            "(defn F [x]\n"
            "\t(if (= x 1)\n"
            "\t\t1\n"
            "\t\t2))\n\n"
        )

    def test_two_space_indent(self):
        t = Translator(" ", 2)
        assert "\n  (if (= x 1)\n    1\n" in t.translate(IF_ELSE)

    def test_reusable(self):
        t = Translator()
        first = t.translate(IF_ELSE)
        assert t.translate(IF_ELSE) == first

    def test_bad_config(self):
        with pytest.raises(ValueError):
            Translator("-", 4)

    def test_load(self, tmp_path):
        source = tmp_path / "one.cs"
        source.write_text("namespace N {\n    int F() {\n        return 1;\n    }\n}\n")
        assert Translator().load(str(source)) == "(ns N)\n\n(defn F [] 1)\n\n"

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Translator().load(str(tmp_path / "missing.cs"))


class TestErrors:
    @pytest.mark.parametrize("source,error,base", [
        ('namespace N { int F() { return "s"; } }', UnrecognizedCharacter, ScanError),
        ("int F() { return 1; }", MissingNamespace, ParseError),
        ("namespace N { int F() { return 1; }", UnterminatedScope, ParseError),
        ("namespace N { int F() { return a b; } }", UnparsableExpression, ParseError),
        ("namespace N { class C { } }", UnsupportedSyntax, ParseError),
        ("namespace N { int F() { x += 1; } }", UnsupportedSyntax, ParseError),
    ])
    def test_error_kinds(self, source, error, base):
        with pytest.raises(error) as info:
            translate(source)
        assert isinstance(info.value, base)
        assert isinstance(info.value, TranslationError)

    def test_messages_name_stage(self):
        with pytest.raises(TranslationError, match="^scan: "):
            translate("namespace N { # }")
        with pytest.raises(TranslationError, match="^parse: "):
            translate("namespace N { int F() { return a b; } }")
