"""
Unit tests for the script tokenizer: comments, quoting, continuation.
"""

from rfscript.script import iter_commands, split_command, tokenize, trim_comments


class TestTrimComments:
    """Test comment stripping outside quotes."""

    def test_plain_comment(self):
        assert trim_comments("rm c  # comment") == "rm c"

    def test_whole_line_comment(self):
        assert trim_comments("# nothing here") == ""

    def test_hash_in_double_quotes(self):
        assert trim_comments('add x "a # b"  # real') == 'add x "a # b"'

    def test_hash_in_single_quotes(self):
        assert trim_comments("add x 'a # b'") == "add x 'a # b'"

    def test_hash_in_backticks(self):
        assert trim_comments("add `x#y`") == "add `x#y`"

    def test_escaped_quote_keeps_string_open(self):
        """A backslash-escaped quote does not close a double-quoted span."""
        assert trim_comments(r'add "a \" # still quoted" # gone') == r'add "a \" # still quoted"'

    def test_backtick_ignores_backslash(self):
        """Backticks are raw: the backslash does not escape the closing backtick."""
        assert trim_comments(r"add `a\` # comment") == r"add `a\`"

    def test_other_quote_inside_quotes(self):
        """A different quote character inside a quoted span is literal."""
        assert trim_comments("""add "it's # here" # gone""") == """add "it's # here\""""

    def test_trims_whitespace(self):
        assert trim_comments("   mv a b   ") == "mv a b"


class TestSplitCommand:
    """Test name/argument splitting."""

    def test_name_and_args(self):
        assert split_command("mv a b") == ("mv", "a b")

    def test_name_only(self):
        assert split_command("debug") == ("debug", "")

    def test_leading_whitespace_of_args_removed(self):
        assert split_command("add\t  x y") == ("add", "x y")


class TestTokenize:
    """Test whole-script tokenization."""

    def test_example_two_commands(self):
        commands = tokenize("mv a b\nrm c  # comment\n")
        assert [(c.name, c.args) for c in commands] == [("mv", "a b"), ("rm", "c")]
        assert [c.text for c in commands] == ["mv a b", "rm c"]

    def test_example_backtick_argument(self):
        commands = tokenize("add `x#y`\n")
        assert len(commands) == 1
        assert commands[0].name == "add"
        assert commands[0].args == "`x#y`"

    def test_blank_and_comment_lines_skipped(self):
        commands = tokenize("\n   \n# only a comment\n\t\nrm x\n")
        assert [c.text for c in commands] == ["rm x"]
        assert commands[0].lineno == 5

    def test_empty_script(self):
        assert tokenize("") == []
        assert tokenize("# just comments\n\n") == []

    def test_continuation_joins_lines(self):
        commands = tokenize("add x.py \\\n  def f():\\\n      pass\nrm y\n")
        assert [c.name for c in commands] == ["add", "rm"]
        assert commands[0].text == "add x.py \n  def f():\n      pass"
        assert commands[1].lineno == 4

    def test_continuation_restrips_comments(self):
        """Comments on continued lines are removed after joining."""
        commands = tokenize("mv a \\\n  b  # new name\n")
        assert commands[0].text == "mv a \n  b"
        assert commands[0].args == "a \n  b"

    def test_comment_hides_continuation(self):
        """A backslash inside a comment does not continue the line."""
        commands = tokenize("rm a # trailing \\\nrm b\n")
        assert [c.text for c in commands] == ["rm a", "rm b"]

    def test_trailing_backslash_at_end_of_script(self):
        """With no following line, a final backslash stays literal."""
        commands = tokenize("rm a \\")
        assert len(commands) == 1
        assert commands[0].text == "rm a \\"
        assert commands[0].args == "a \\"

    def test_trailing_backslash_before_final_newline(self):
        commands = tokenize("rm a \\\n")
        assert [c.text for c in commands] == ["rm a \\"]

    def test_display_marks_multiline_commands(self):
        commands = tokenize("add x.py \\\n  y = 1\nrm z\n")
        assert commands[0].display == "add x.py  \\ ..."
        assert commands[1].display == "rm z"

    def test_iter_commands_is_lazy(self):
        it = iter_commands("rm a\nrm b\n")
        assert next(it).args == "a"
        assert next(it).args == "b"
