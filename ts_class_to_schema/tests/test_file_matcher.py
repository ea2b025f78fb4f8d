from pathlib import Path

import pytest

from ts_class_to_schema.pipeline.output import FileMatcher


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    for name in [
        "src/user.ts",
        "src/order.ts",
        "src/user.test.ts",
        "src/nested/deep/item.ts",
        "src/.hidden/secret.ts",
        "src/readme.md",
        "lib/other.ts",
    ]:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export class A {}\n")
    (tmp_path / "src" / "folder.ts").mkdir()
    return tmp_path


class TestFileMatcher:
    def test_recursive_glob_is_sorted(self, tree):
        files = FileMatcher(["src/**/*.ts"], root_dir=str(tree)).find()
        assert files == [
            "src/.hidden/secret.ts",
            "src/nested/deep/item.ts",
            "src/order.ts",
            "src/user.test.ts",
            "src/user.ts",
        ]

    def test_exclude_patterns(self, tree):
        files = FileMatcher(["src/**/*.ts"], ["**/*.test.ts", "src/.hidden/**"], root_dir=str(tree)).find()
        assert files == ["src/nested/deep/item.ts", "src/order.ts", "src/user.ts"]

    def test_negated_include(self, tree):
        files = FileMatcher(["src/*.ts", "!src/user*.ts"], root_dir=str(tree)).find()
        assert files == ["src/order.ts"]

    def test_overlapping_patterns_are_deduplicated(self, tree):
        files = FileMatcher(["src/*.ts", "src/user.ts", "lib/*.ts"], root_dir=str(tree)).find()
        assert files == ["lib/other.ts", "src/order.ts", "src/user.test.ts", "src/user.ts"]

    def test_no_match(self, tree):
        assert FileMatcher(["app/**/*.ts"], root_dir=str(tree)).find() == []

    def test_absolute_pattern(self, tree):
        files = FileMatcher([str(tree / "lib" / "*.ts")]).find()
        assert files == [str(tree / "lib" / "other.ts")]
