"""Integration tests for source and file processing."""

import os
from unittest.mock import patch

import pytest

from code_commenter.constants import CommentTemplates, LargeFileDefaults
from code_commenter.core.exceptions import SourceParseError
from code_commenter.features.commenting.processor import (
    discover_files,
    document_source,
    insert_comments,
    process_file,
    process_files,
)
from code_commenter.models.config import CommenterConfig
from code_commenter.models.syntax import SourceLanguage, SourceLocation

UNKNOWN = " (Type could not be inferred)"


class TestDocumentSource:
    """Tests for document_source."""

    def test_class_method_is_indented(self, quiet_config):
        """Test comments follow the indentation of the documented line."""
        source = "class Greeter {\n  greet(name) {\n    return `Hi ${name}`;\n  }\n}\n"
        result = document_source(source, config=quiet_config)
        assert result.source == (
            "class Greeter {\n"
            "  /**\n"
            "   * Function greet with parameter 'name'\n"
            "   *\n"
            f"   * @param {{any}} name - Parameter 'name'{UNKNOWN}\n"
            "   *\n"
            "   * @returns {string} - The return value\n"
            "   */\n"
            "  greet(name) {\n"
            "    return `Hi ${name}`;\n"
            "  }\n"
            "}\n"
        )
        assert result.comments_added == 1
        assert result.comments[0].line_number == 2

    def test_documented_functions_are_skipped(self, quiet_config):
        """Test functions with a comment directly above are left alone."""
        source = "/** Adds. */\nfunction add(a, b) {}\n\nfunction sub(a, b) {}\n"
        result = document_source(source, config=quiet_config)
        assert [c.function_name for c in result.comments] == ["sub"]
        assert result.source.startswith("/** Adds. */\nfunction add(a, b) {}\n\n/**\n")

    def test_idempotent(self, sample_js_code):
        """Test a second run adds nothing."""
        first = document_source(sample_js_code)
        assert first.comments_added == 5
        second = document_source(first.source)
        assert second.comments_added == 0
        assert second.source == first.source

    def test_todo_line_by_default(self):
        """Test the default configuration includes a TODO line."""
        result = document_source("function f() {}\n")
        assert result.source == "/**\n * Function f\n * TODO: Document what f does\n */\nfunction f() {}\n"

    def test_export_is_anchor(self, quiet_config):
        """Test comments go above the export keyword."""
        result = document_source("export const f = (a) => a;\n", config=quiet_config)
        assert result.source.endswith(" */\nexport const f = (a) => a;\n")

    def test_decorated_method(self, quiet_config):
        """Test comments go above a method's decorators."""
        source = "class C {\n  @dec()\n  m(a) {}\n}\n"
        result = document_source(source, SourceLanguage.TYPESCRIPT, quiet_config)
        assert result.source == (
            "class C {\n"
            "  /**\n"
            "   * Function m with parameter 'a'\n"
            "   *\n"
            f"   * @param {{any}} a - Parameter 'a'{UNKNOWN}\n"
            "   */\n"
            "  @dec()\n"
            "  m(a) {}\n"
            "}\n"
        )
        again = document_source(result.source, SourceLanguage.TYPESCRIPT, quiet_config)
        assert again.comments_added == 0

    def test_documented_decorated_method_is_skipped(self, quiet_config):
        """Test a comment above the decorators counts as documentation."""
        source = "class C {\n  // Runs.\n  @dec()\n  m(a) {}\n}\n"
        result = document_source(source, SourceLanguage.TYPESCRIPT, quiet_config)
        assert result.comments_added == 0
        assert result.source == source

    def test_returned_undefined_is_any(self, quiet_config):
        """Test a returned undefined is classified like any identifier."""
        result = document_source("function f() { return undefined; }\n", config=quiet_config)
        assert result.source.startswith("/**\n * Function f\n *\n * @returns {any} - The return value\n */\n")

    def test_void_annotation_is_documented(self, quiet_config):
        """Test an explicit void return annotation is rendered."""
        source = "function f(): void { return; }\n"
        result = document_source(source, SourceLanguage.TYPESCRIPT, quiet_config)
        assert result.source == "/**\n * Function f\n *\n * @returns {void} - The return value\n */\n" + source

    def test_typescript_source(self, sample_ts_code, quiet_config):
        """Test typed sources use annotations."""
        result = document_source(sample_ts_code, SourceLanguage.TYPESCRIPT, quiet_config)
        assert result.comments_added == 3
        assert "@param {number} value  - Parameter 'value'" in result.source
        assert "@param {string} [unit] - Parameter 'unit'" in result.source
        assert "@param {string} url         - Class property parameter 'url'" in result.source
        assert "@param {number} [retries=3] - Class property parameter 'retries'" in result.source
        assert "@param {...number} ids - Rest parameter" in result.source
        assert "@returns {Promise<Array<Item>>} - The return value" in result.source

    def test_strict_mode_raises(self):
        """Test strict mode rejects sources with syntax errors."""
        config = CommenterConfig(strict=True)
        with pytest.raises(SourceParseError, match="Parsing failed for file: broken.js"):
            document_source("function f( {\n", config=config, file_path="broken.js")

    def test_syntax_errors_reported(self):
        """Test syntax errors are returned in lenient mode."""
        result = document_source("function ok() {}\nconst = ;\n")
        assert result.syntax_errors

    def test_fallback_comment(self, quiet_config):
        """Test an empty render falls back to the parse-failure comment."""
        with patch("code_commenter.features.commenting.processor.generate_function_doc", return_value=""):
            result = document_source("function f() {}\n", config=quiet_config)
        assert result.source == CommentTemplates.FALLBACK_COMMENT + "\nfunction f() {}\n"
        assert result.comments[0].fallback is True


class TestLargeFiles:
    """Tests for the large-file warning."""

    def test_warning_prepended(self, quiet_config):
        """Test large files get a warning at the top."""
        config = quiet_config.merged_with({"large_file_line_threshold": 3})
        result = document_source("function a() {}\n\n\n\n", config=config)
        assert result.large_file_warning is True
        assert result.source.startswith(LargeFileDefaults.WARNING_COMMENT + "/**\n")

    def test_warning_after_shebang(self, quiet_config):
        """Test the warning goes below a shebang line."""
        config = quiet_config.merged_with({"large_file_line_threshold": 3})
        result = document_source("#!/usr/bin/env node\n\nfunction a() {}\n\n", config=config)
        assert result.source.startswith("#!/usr/bin/env node\n" + LargeFileDefaults.WARNING_COMMENT)

    def test_warning_not_duplicated(self, quiet_config):
        """Test an existing warning is not added twice."""
        config = quiet_config.merged_with({"large_file_line_threshold": 3})
        source = LargeFileDefaults.WARNING_COMMENT + "\nfunction a() {}\n\n\n"
        result = document_source(source, config=config)
        assert result.comments_added == 1
        assert result.large_file_warning is False
        assert result.source.count("WARNING: This file is very large") == 1

    def test_small_files_have_no_warning(self, quiet_config):
        """Test files under the thresholds are not flagged."""
        assert document_source("function a() {}\n", config=quiet_config).large_file_warning is False


class TestInsertComments:
    """Tests for insert_comments."""

    def test_insert_at_line_start(self):
        """Test comments are inserted above indented lines."""
        source = "if (x) {\n    run();\n}\n"
        offset = source.index("run")
        result = insert_comments(source, [(SourceLocation(2, 4, offset), "/**\n * Run.\n */")])
        assert result == "if (x) {\n    /**\n     * Run.\n     */\n    run();\n}\n"

    def test_insert_mid_line(self):
        """Test anchors that share a line with other code start a new line."""
        source = "x(); function f() {}"
        offset = source.index("function")
        result = insert_comments(source, [(SourceLocation(1, offset, offset), "/** f */")])
        assert result == "x(); \n/** f */\nfunction f() {}"

    def test_multiple_insertions_keep_offsets(self):
        """Test insertion order does not shift later anchors."""
        source = "a();\nb();\n"
        insertions = [(SourceLocation(1, 0, 0), "// A"), (SourceLocation(2, 0, 5), "// B")]
        assert insert_comments(source, insertions) == "// A\na();\n// B\nb();\n"


class TestProcessFile:
    """Tests for process_file."""

    def test_writes_in_place(self, temp_project_dir, quiet_config):
        """Test files are rewritten with comments."""
        path = os.path.join(temp_project_dir, "src", "math.js")
        result = process_file(path, quiet_config)
        assert result.comments_added == 2
        assert result.output_path == path
        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert content.startswith("/**\n * Function add with parameters 'a', 'b'\n")
        assert "\n */\nconst double = (x) => x * 2;\n" in content

    def test_dry_run(self, temp_project_dir, quiet_config):
        """Test dry runs return a preview without writing."""
        path = os.path.join(temp_project_dir, "src", "math.js")
        with open(path, encoding="utf-8") as f:
            original = f.read()
        result = process_file(path, quiet_config.merged_with({"dry_run": True}))
        assert result.dry_run is True
        assert "Function add" in result.preview
        with open(path, encoding="utf-8") as f:
            assert f.read() == original

    def test_output_directory(self, temp_project_dir, temp_dir, quiet_config):
        """Test results can be written to another directory."""
        path = os.path.join(temp_project_dir, "src", "math.js")
        out_dir = os.path.join(temp_dir, "out")
        result = process_file(path, quiet_config.merged_with({"output": out_dir}))
        assert result.output_path == os.path.join(out_dir, "math.js")
        assert os.path.isfile(result.output_path)
        with open(path, encoding="utf-8") as f:
            assert "/**" not in f.read()

    def test_documented_file_skipped(self, temp_project_dir):
        """Test files with nothing to document are skipped."""
        result = process_file(os.path.join(temp_project_dir, "src", "documented.js"))
        assert result.skipped is True
        assert result.error is None

    def test_empty_file_skipped(self, temp_dir):
        """Test whitespace-only files are skipped."""
        path = os.path.join(temp_dir, "empty.js")
        with open(path, "w", encoding="utf-8") as f:
            f.write("  \n")
        assert process_file(path).skipped is True

    def test_missing_file(self, temp_dir):
        """Test unreadable files produce an error result."""
        path = os.path.join(temp_dir, "missing.js")
        result = process_file(path)
        assert result.error == f"Error processing {path}: File not found"
        assert result.exit_code == 1

    def test_strict_failure(self, temp_dir):
        """Test strict parse failures produce an error result."""
        path = os.path.join(temp_dir, "broken.js")
        with open(path, "w", encoding="utf-8") as f:
            f.write("function f( {\n")
        result = process_file(path, CommenterConfig(strict=True))
        assert result.error.startswith(f"Parsing failed for file: {path}")


class TestProcessFiles:
    """Tests for process_files and discovery."""

    def test_discover_files(self, temp_project_dir):
        """Test glob discovery skips node_modules and duplicates."""
        pattern = os.path.join(temp_project_dir, "**", "*.js")
        files = discover_files([pattern, os.path.join(temp_project_dir, "src", "math.js")])
        assert [os.path.basename(f) for f in files] == ["documented.js", "math.js"]

    def test_batch_counts(self, temp_project_dir, quiet_config):
        """Test processed, skipped and error counts."""
        patterns = [
            os.path.join(temp_project_dir, "src", "*.js"),
            os.path.join(temp_project_dir, "src", "*.ts"),
        ]
        batch = process_files(patterns, quiet_config)
        assert (batch.processed, batch.skipped, batch.errors) == (2, 1, 0)
        assert batch.exit_code == 0

    def test_parallel_workers(self, temp_project_dir, quiet_config):
        """Test parallel processing keeps discovery order."""
        pattern = os.path.join(temp_project_dir, "src", "*")
        batch = process_files([pattern], quiet_config.merged_with({"workers": 3}))
        assert [os.path.basename(r.file_path) for r in batch.results] == ["documented.js", "math.js", "types.ts"]
        assert batch.processed == 2

    def test_no_files(self, temp_dir):
        """Test an empty match is an error."""
        batch = process_files([os.path.join(temp_dir, "*.js")])
        assert batch.errors == 1
        assert batch.messages == ["No files found matching the patterns"]
        assert batch.exit_code == 1

    def test_stop_on_error(self, temp_dir):
        """Test processing stops at the first failure when asked."""
        for name, content in (("a.js", "function f( {\n"), ("b.js", "function g() {}\n")):
            with open(os.path.join(temp_dir, name), "w", encoding="utf-8") as f:
                f.write(content)
        config = CommenterConfig(strict=True, continue_on_error=False)
        batch = process_files([os.path.join(temp_dir, "*.js")], config)
        assert batch.errors == 1
        assert len(batch.results) == 1

    def test_continue_on_error(self, temp_dir):
        """Test remaining files are processed after a failure by default."""
        for name, content in (("a.js", "function f( {\n"), ("b.js", "function g() {}\n")):
            with open(os.path.join(temp_dir, name), "w", encoding="utf-8") as f:
                f.write(content)
        batch = process_files([os.path.join(temp_dir, "*.js")], CommenterConfig(strict=True))
        assert (batch.processed, batch.errors) == (1, 1)

    def test_unexpected_errors_are_captured(self, temp_project_dir):
        """Test crashes in one file are reported and sent to Sentry."""
        pattern = os.path.join(temp_project_dir, "src", "math.js")
        with patch(
            "code_commenter.features.commenting.processor.process_file", side_effect=RuntimeError("boom")
        ), patch("code_commenter.features.commenting.processor.sentry_sdk") as mock_sentry:
            batch = process_files([pattern])
        assert batch.errors == 1
        assert "boom" in batch.results[0].error
        mock_sentry.capture_exception.assert_called_once()
