import pytest
from pydantic import ValidationError

from route_docs.registry.base import DocOptions, Parameter, RouteRecord, ValidatorAttachment, ValidatorTarget


class TestRouteRecord:
    def test_defaults_to_synthetic_200(self):
        record = RouteRecord(method="GET", path="/health")
        assert record.method == "get"
        assert record.responses == {"200": {"description": "Successful response"}}
        assert record.validators == ()

    def test_empty_responses_fall_back_to_default(self):
        assert RouteRecord(method="get", path="/", responses={}).responses == {"200": {"description": "Successful response"}}

    def test_status_codes_are_stringified(self):
        record = RouteRecord(method="post", path="/users", responses={201: {"description": "Created"}})
        assert record.responses == {"201": {"description": "Created"}}

    def test_is_immutable(self):
        record = RouteRecord(method="get", path="/")
        with pytest.raises(ValidationError):
            record.path = "/other"

    def test_from_options(self):
        options = DocOptions(summary="List", tags=["users"], parameters=[{"name": "q", "in": "query"}])
        record = RouteRecord.from_options("get", "/users", options)
        assert record.summary == "List"
        assert record.tags == ["users"]
        assert record.parameters[0].location == "query"
        assert record.description is None


class TestParameter:
    def test_alias_round_trip_to_openapi(self):
        param = Parameter.model_validate({"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}})
        assert param.to_openapi() == {"name": "id", "in": "path", "required": True, "schema": {"type": "integer"}}

    def test_extra_fields_are_kept(self):
        param = Parameter(name="q", location="query", example="abc")
        assert param.to_openapi() == {"name": "q", "in": "query", "required": False, "example": "abc"}


class TestValidatorAttachment:
    def test_aliases(self):
        assert ValidatorAttachment("json", {}).target is ValidatorTarget.BODY_JSON
        assert ValidatorAttachment("form", {}).target is ValidatorTarget.BODY_FORM
        assert ValidatorAttachment("param", {}).target is ValidatorTarget.PATH
        assert ValidatorAttachment("cookie", {}).target.location == "cookie"

    def test_schema_identity_is_preserved(self):
        tree = {"_def": {"typeName": "ZodString"}}
        assert ValidatorAttachment("query", tree).schema_ is tree

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            ValidatorAttachment("body", {})
