"""
Unit tests for the SQL statement builders.

Run with: pytest src/rowmodel/query/statements_test.py -v
"""
import pytest

from rowmodel.exceptions import EmptyKwargsError, UnknownFieldError
from rowmodel.query import kwargs
from rowmodel.query import statements


@pytest.fixture
def meta(user_model):
    return user_model.__meta__


class TestQuote:
    @pytest.mark.parametrize("identifier,quoted", [
        ("user", '"user"'),
        ("is_sel", '"is_sel"'),
        ('we"ird', '"we""ird"'),
    ])
    def test_quote(self, identifier, quoted):
        assert statements.quote(identifier) == quoted


class TestSelect:
    """Tests for statements.select()"""

    def test_all_rows(self, meta):
        assert statements.select(meta) == ('SELECT * FROM "user"', ())

    def test_empty_kwargs_has_no_where(self, meta):
        assert statements.select(meta, kwargs()) == ('SELECT * FROM "user"', ())

    def test_and_terms(self, meta):
        query, params = statements.select(meta, kwargs(email="joe@example.com", password="secret"))

        assert query == (
            'SELECT * FROM "user" WHERE "user"."email" = %s AND "user"."password" = %s'
        )
        assert params == ("joe@example.com", "secret")

    def test_or_terms(self, meta):
        query, params = statements.select(meta, kwargs(name="joe", role="admin").or_())

        assert query == 'SELECT * FROM "user" WHERE "user"."name" = %s OR "user"."role" = %s'
        assert params == ("joe", "admin")

    def test_none_is_null(self, meta):
        query, params = statements.select(meta, kwargs(email=None, role="user"))

        assert query == 'SELECT * FROM "user" WHERE "user"."email" IS NULL AND "user"."role" = %s'
        assert params == ("user",)

    def test_limit(self, meta):
        query, params = statements.select(meta, kwargs(name="joe"), limit=1)

        assert query == 'SELECT * FROM "user" WHERE "user"."name" = %s LIMIT %s'
        assert params == ("joe", 1)

    def test_related_table_term(self, meta):
        query, params = statements.select(meta, kwargs(owner__product__is_sel=True))

        assert query == (
            'SELECT DISTINCT "user".* FROM "user" '
            'INNER JOIN "product" ON "user"."id" = "product"."owner" '
            'WHERE "product"."is_sel" = %s'
        )
        assert params == (True,)

    def test_related_table_joined_once(self, meta):
        query, params = statements.select(
            meta, kwargs(owner__product__is_sel=True, owner__product__name="tomato", role="user")
        )

        assert query.count("INNER JOIN") == 1
        assert query.endswith(
            'WHERE "product"."is_sel" = %s AND "product"."name" = %s AND "user"."role" = %s'
        )
        assert params == (True, "tomato", "user")

    def test_unknown_field_raises(self, meta):
        with pytest.raises(UnknownFieldError, match="nickname"):
            statements.select(meta, kwargs(nickname="joe"))


class TestCount:
    def test_count_all(self, meta):
        assert statements.count(meta) == ('SELECT COUNT(*) AS count FROM "user"', ())

    def test_count_filtered(self, meta):
        query, params = statements.count(meta, kwargs(role="admin"))

        assert query == 'SELECT COUNT(*) AS count FROM "user" WHERE "user"."role" = %s'
        assert params == ("admin",)

    def test_count_joined_counts_distinct_keys(self, meta):
        query, _ = statements.count(meta, kwargs(owner__product__is_sel=True))

        assert query.startswith('SELECT COUNT(DISTINCT "user"."id") AS count FROM "user" INNER JOIN')


class TestInsert:
    """Tests for statements.insert()"""

    def test_insert(self, meta):
        query, params = statements.insert(meta, [("name", "joe"), ("password", "secret")])

        assert query == 'INSERT INTO "user" ("name", "password") VALUES (%s, %s) RETURNING *'
        assert params == ("joe", "secret")

    def test_insert_defaults(self, meta):
        assert statements.insert(meta, []) == ('INSERT INTO "user" DEFAULT VALUES RETURNING *', ())

    def test_insert_unknown_field_raises(self, meta):
        with pytest.raises(UnknownFieldError):
            statements.insert(meta, [("nickname", "joe")])

    def test_insert_rejects_related_key(self, meta):
        with pytest.raises(UnknownFieldError):
            statements.insert(meta, [("owner__product__is_sel", True)])


class TestUpdate:
    """Tests for statements.update()"""

    def test_update(self, meta):
        query, params = statements.update(meta, [("role", "admin"), ("email", None)], 7)

        assert query == 'UPDATE "user" SET "role" = %s, "email" = %s WHERE "id" = %s'
        assert params == ("admin", None, 7)

    def test_update_nothing_raises(self, meta):
        with pytest.raises(EmptyKwargsError):
            statements.update(meta, [], 7)

    def test_update_unknown_field_raises(self, meta):
        with pytest.raises(UnknownFieldError):
            statements.update(meta, [("nickname", "joe")], 7)


class TestDelete:
    def test_delete(self, meta):
        assert statements.delete(meta, 3) == ('DELETE FROM "user" WHERE "id" = %s', (3,))

    def test_delete_many(self, meta):
        query, params = statements.delete_many(meta, (1, 2, 3))

        assert query == 'DELETE FROM "user" WHERE "id" = ANY(%s)'
        assert params == ([1, 2, 3],)


class TestExists:
    def test_exists(self, meta):
        assert statements.exists(meta, 5) == (
            'SELECT EXISTS (SELECT 1 FROM "user" WHERE "id" = %s) AS found',
            (5,),
        )
