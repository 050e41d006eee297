import pytest

from booking_api.auth.roles import Role, is_authorized, resolve_role


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('admin', Role.ADMIN),
        (' Instructor ', Role.INSTRUCTOR),
        ('none', Role.NONE),
        ('student', Role.NONE),
        (None, Role.NONE),
    ],
)
def test_role_from_value_maps_unknown_values_to_none(value, expected: Role) -> None:
    assert Role.from_value(value) == expected


@pytest.mark.parametrize('caller_role', [Role.NONE, Role.INSTRUCTOR])
def test_is_authorized_rejects_non_admin_for_admin_role(caller_role: Role) -> None:
    assert not is_authorized(Role.ADMIN, 'someone@example.com', caller_role)


def test_is_authorized_requires_exact_role_match() -> None:
    assert is_authorized(Role.INSTRUCTOR, 'teacher@example.com', Role.INSTRUCTOR)
    assert not is_authorized(Role.INSTRUCTOR, 'admin@example.com', Role.ADMIN)


def test_is_authorized_enforces_owner_match_regardless_of_role() -> None:
    assert is_authorized(None, 's@x.com', owner_email=' S@X.com ')
    assert not is_authorized(None, 's@x.com', owner_email='other@x.com')
    assert not is_authorized(Role.ADMIN, 'admin@x.com', Role.ADMIN, owner_email='other@x.com')


def test_is_authorized_rejects_blank_caller() -> None:
    assert not is_authorized(None, '   ')


def test_resolve_role_reads_stored_role(db, make_user) -> None:
    make_user('admin@example.com', role='admin')
    make_user('legacy@example.com', role=None)

    assert resolve_role(db, 'ADMIN@example.com') == Role.ADMIN
    assert resolve_role(db, 'legacy@example.com') == Role.NONE
    assert resolve_role(db, 'missing@example.com') == Role.NONE
