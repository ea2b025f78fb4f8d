import pytest

from ts_class_to_schema.pipeline.output import PathResolver


@pytest.fixture
def resolver():
    return PathResolver()


class TestPathResolver:
    def test_builtin_variables(self, resolver):
        assert (
            resolver.resolve("src/models/user.ts", "{dirname}/schemas/{filename}.schema{extension}")
            == "src/models/schemas/user.schema.ts"
        )

    def test_dirname_of_bare_file(self, resolver):
        assert resolver.resolve("user.ts", "{dirname}/{filename}.schema.ts") == "./user.schema.ts"

    def test_fixed_variable(self, resolver):
        assert resolver.resolve("src/user.ts", "{out}/{filename}.ts", {"out": "generated"}) == "generated/user.ts"

    def test_regex_variable(self, resolver):
        variables = {"module": {"regex": r"src/modules/(\w+)/"}}
        path = resolver.resolve("src/modules/billing/dto/invoice.ts", "schemas/{module}/{filename}.ts", variables)
        assert path == "schemas/billing/invoice.ts"

    def test_regex_without_match_is_empty(self, resolver):
        variables = {"module": {"regex": r"modules/(\w+)/"}}
        assert resolver.resolve("src/user.ts", "schemas/{module}{filename}.ts", variables) == "schemas/user.ts"

    def test_custom_variable_overrides_builtin(self, resolver):
        assert resolver.resolve("src/user.ts", "{filename}.ts", {"filename": "all"}) == "all.ts"

    def test_every_occurrence_is_replaced(self, resolver):
        assert resolver.resolve("a/b.ts", "{filename}/{filename}.ts") == "b/b.ts"
