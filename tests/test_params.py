from route_docs.document.params import extract_path_params, merge_parameters, to_openapi_path
from route_docs.registry.base import Parameter


class TestExtractPathParams:
    def test_single_placeholder(self):
        params = extract_path_params("/users/:id")
        assert [p.to_openapi() for p in params] == [
            {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
        ]

    def test_order_and_distinct_names(self):
        params = extract_path_params("/orgs/:org_id/users/:user_id/:org_id")
        assert [p.name for p in params] == ["org_id", "user_id"]

    def test_identifier_rules(self):
        assert [p.name for p in extract_path_params("/a/:_x1/b/:9bad")] == ["_x1"]

    def test_no_placeholders(self):
        assert extract_path_params("/health") == []


class TestToOpenapiPath:
    def test_brace_syntax(self):
        assert to_openapi_path("/users/:id/posts/:postId") == "/users/{id}/posts/{postId}"


class TestMergeParameters:
    def test_explicit_wins_by_name(self):
        explicit = [Parameter(name="id", location="path", required=True, schema={"type": "integer"})]
        merged = merge_parameters(explicit, extract_path_params("/users/:id"))
        assert len(merged) == 1
        assert merged[0].schema_ == {"type": "integer"}

    def test_inferred_fill_gaps_after_explicit(self):
        explicit = [Parameter(name="q", location="query")]
        merged = merge_parameters(explicit, extract_path_params("/users/:id"))
        assert [p.name for p in merged] == ["q", "id"]

    def test_name_comparison_is_case_sensitive(self):
        explicit = [Parameter(name="ID", location="path", required=True)]
        merged = merge_parameters(explicit, extract_path_params("/users/:id"))
        assert [p.name for p in merged] == ["ID", "id"]
