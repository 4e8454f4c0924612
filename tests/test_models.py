"""Tests for Schema, Model and Entity operations running through hooks."""

import pytest

from storehooks import (
    DeleteResult,
    EntityNotFoundError,
    EntityScope,
    HookError,
    MemoryAdapter,
    Model,
    PostHookEnvelope,
    PostHookError,
    Schema,
    StaticScope,
    UnknownOperationError,
    override,
)


@pytest.fixture
def adapter():
    return MemoryAdapter()


@pytest.fixture
def schema():
    return Schema()


@pytest.fixture
def users(schema, adapter):
    return Model("User", schema, adapter)


# =============================================================================
# Schema tests
# =============================================================================


class TestSchema:
    def test_pre_and_post_register_on_registry(self, schema):
        async def a(scope, *args): ...
        async def b(scope, *args): ...

        schema.pre("save", a).post("save", [b])
        assert schema.hooks.get_chain("save", "pre") == (a,)
        assert schema.hooks.get_chain("save", "post") == (b,)

    def test_unknown_operation(self, schema):
        async def a(scope, *args): ...

        with pytest.raises(UnknownOperationError):
            schema.pre("archive", a)

    def test_method_with_hooks_opts_in(self, schema):
        async def archive(entity): ...
        async def a(scope, *args): ...

        schema.method("archive", archive, hooks=True)
        schema.pre("archive", a)
        assert schema.methods["archive"] is archive

    def test_method_without_hooks_stays_unhookable(self, schema):
        async def archive(entity): ...
        async def a(scope, *args): ...

        schema.method("archive", archive)
        with pytest.raises(UnknownOperationError):
            schema.post("archive", a)

    def test_method_name_clash(self, schema):
        async def save(entity): ...

        with pytest.raises(ValueError, match="clashes"):
            schema.method("save", save)

    def test_constructor_custom_operations(self):
        async def a(scope, *args): ...

        schema = Schema(custom_operations=["publish"])
        schema.post("publish", a)
        assert schema.hooks.get_chain("publish", "post") == (a,)


# =============================================================================
# Save tests
# =============================================================================


class TestSave:
    @pytest.mark.asyncio
    async def test_save_assigns_id_and_stores(self, users, adapter):
        user = users.create({"email": "a@example.com"})
        result = await user.save()

        assert result is user
        assert user.id is not None
        assert adapter.tables["User"][user.id] == {"email": "a@example.com"}

    @pytest.mark.asyncio
    async def test_password_hashed_by_pre_hook(self, schema, users, adapter):
        async def hash_password(scope, *args):
            scope.entity["password"] = f"HASHED({scope.entity['password']})"

        schema.pre("save", hash_password)
        user = users.create({"email": "a@example.com", "password": "mypw"})
        await user.save()

        stored = await users.get(user.id)
        assert stored["password"] == "HASHED(mypw)"
        assert adapter.tables["User"][user.id]["password"] == "HASHED(mypw)"

    @pytest.mark.asyncio
    async def test_save_scope_is_entity(self, schema, users):
        scopes = []

        async def capture(scope, *args):
            scopes.append(scope)

        schema.pre("save", capture)
        user = users.create({"name": "x"})
        await user.save()

        assert isinstance(scopes[0], EntityScope)
        assert scopes[0].entity is user
        assert scopes[0].model is users
        assert not scopes[0].is_static

    @pytest.mark.asyncio
    async def test_post_hook_errors_collected(self, schema, users):
        ran = []

        async def failing(scope, entity):
            raise HookError("x", code=500)

        async def succeeding(scope, entity):
            ran.append(entity.id)

        schema.post("save", [failing, succeeding])
        user = users.create({"name": "x"})
        result = await user.save()

        assert isinstance(result, PostHookEnvelope)
        assert result.result is user
        assert list(result.errors_post_hook) == [PostHookError(code=500, message="x")]
        assert ran == [user.id]

    @pytest.mark.asyncio
    async def test_pre_hook_rejection_prevents_save(self, schema, users, adapter):
        async def reject(scope, *args):
            raise HookError("Email is required", code=400)

        schema.pre("save", reject)
        with pytest.raises(HookError, match="Email is required"):
            await users.create({"name": "x"}).save()
        assert adapter.tables.get("User", {}) == {}

    @pytest.mark.asyncio
    async def test_pre_hooks_disabled(self, schema, users, adapter):
        async def reject(scope, *args):
            raise HookError("blocked")

        schema.pre("save", reject)
        user = users.create({"name": "x"})
        await user.save(pre_hooks=False)
        assert user.id in adapter.tables["User"]

        with pytest.raises(HookError):
            await users.create({"name": "y"}).save()


# =============================================================================
# Delete tests
# =============================================================================


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_override_redirects_target(self, schema, users, adapter):
        await users.create({"n": 1}, id=123).save()
        await users.create({"n": 2}, id=999).save()

        async def redirect(scope, id, *args):
            return override(999)

        schema.pre("delete", redirect)
        result = await users.delete(123)

        assert result == DeleteResult(success=True, keys=[999], deleted=[999])
        assert 123 in adapter.tables["User"]
        assert 999 not in adapter.tables["User"]

    @pytest.mark.asyncio
    async def test_post_scope_follows_overridden_ids(self, schema, users):
        pre_scopes, post_scopes = [], []

        async def redirect(scope, id, *args):
            pre_scopes.append(scope)
            return override(999)

        async def capture(scope, result):
            post_scopes.append(scope)

        schema.pre("delete", redirect)
        schema.post("delete", capture)
        await users.delete(123)

        assert pre_scopes[0].entity.id == 123
        assert isinstance(post_scopes[0], EntityScope)
        assert post_scopes[0].entity.id == 999

    @pytest.mark.asyncio
    async def test_override_to_id_list_binds_static_post_scope(self, schema, users):
        post_scopes = []

        async def widen(scope, id, *args):
            return override([id, id + 1])

        async def capture(scope, result):
            post_scopes.append((scope, result.keys))

        schema.pre("delete", widen)
        schema.post("delete", capture)
        await users.delete(7)

        scope, keys = post_scopes[0]
        assert isinstance(scope, StaticScope)
        assert keys == [7, 8]

    @pytest.mark.asyncio
    async def test_single_id_binds_entity_scope(self, schema, users):
        scopes = []

        async def capture(scope, *args):
            scopes.append(scope)

        schema.pre("delete", capture)
        await users.delete(5)

        assert isinstance(scopes[0], EntityScope)
        assert scopes[0].entity.id == 5
        assert scopes[0].entity.data == {}

    @pytest.mark.asyncio
    async def test_id_list_binds_static_scope(self, schema, users):
        scopes = []

        async def capture(scope, *args):
            scopes.append(scope)

        schema.pre("delete", capture)
        schema.post("delete", capture)
        await users.delete([1, 2, 3])

        assert all(isinstance(s, StaticScope) for s in scopes)
        assert scopes[0].model is users
        assert scopes[0].is_static

    @pytest.mark.asyncio
    async def test_post_hooks_receive_keys(self, schema, users):
        await users.create({}, id=1).save()
        received = []

        async def capture(scope, result):
            received.append(result)

        schema.post("delete", capture)
        await users.delete([1, 2])
        assert received == [DeleteResult(success=True, keys=[1, 2], deleted=[1])]

    @pytest.mark.asyncio
    async def test_delete_missing_reports_no_success(self, users):
        result = await users.delete(42)
        assert result == DeleteResult(success=False, keys=[42], deleted=[])


# =============================================================================
# Get tests
# =============================================================================


class TestGet:
    @pytest.mark.asyncio
    async def test_get_single(self, users):
        await users.create({"name": "John"}, id="u1").save()
        user = await users.get("u1")
        assert user.id == "u1"
        assert user["name"] == "John"
        assert user.to_dict() == {"id": "u1", "name": "John"}

    @pytest.mark.asyncio
    async def test_get_missing_raises_and_skips_post(self, schema, users):
        ran = []

        async def post(scope, result):
            ran.append(result)

        schema.post("get", post)
        with pytest.raises(EntityNotFoundError) as excinfo:
            await users.get("nope")
        assert excinfo.value.code == 404
        assert ran == []

    @pytest.mark.asyncio
    async def test_get_many_keeps_order(self, schema, users):
        await users.create({"n": 1}, id=1).save()
        await users.create({"n": 3}, id=3).save()
        scopes = []

        async def capture(scope, *args):
            scopes.append(scope)

        schema.pre("get", capture)
        result = await users.get([3, 2, 1])

        assert [e.id if e else None for e in result] == [3, None, 1]
        assert isinstance(scopes[0], StaticScope)

    @pytest.mark.asyncio
    async def test_post_hook_can_decorate_result(self, schema, users):
        await users.create({"first": "Ada", "last": "Lovelace"}, id=1).save()

        async def full_name(scope, entity):
            entity["fullName"] = f"{entity['first']} {entity['last']}"

        schema.post("get", full_name)
        user = await users.get(1)
        assert user["fullName"] == "Ada Lovelace"


# =============================================================================
# Custom method tests
# =============================================================================


class TestCustomMethods:
    @pytest.mark.asyncio
    async def test_hooked_custom_method(self, schema, users):
        calls = []

        async def archive(entity, reason):
            entity["archived"] = reason
            return reason

        async def pre(scope, reason):
            calls.append(("pre", scope.entity.id, reason))
            return override(reason.upper())

        async def post(scope, result):
            calls.append(("post", result))

        schema.method("archive", archive, hooks=True)
        schema.pre("archive", pre)
        schema.post("archive", post)

        user = users.create({}, id=1)
        result = await user.archive("spam")

        assert result == "SPAM"
        assert user["archived"] == "SPAM"
        assert calls == [("pre", 1, "spam"), ("post", "SPAM")]

    @pytest.mark.asyncio
    async def test_unhooked_custom_method_called_directly(self, schema, users):
        async def greet(entity, greeting="Hi"):
            return f"{greeting} {entity['name']}"

        schema.method("greet", greet)
        user = users.create({"name": "Ada"})
        assert await user.greet(greeting="Hello") == "Hello Ada"

    def test_unknown_attribute(self, users):
        with pytest.raises(AttributeError):
            users.create({}).nope
