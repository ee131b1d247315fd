import pytest
from pydantic import ValidationError

from blog_api.core.exceptions import format_validation_error
from blog_api.schemas.comment import CommentCreate
from blog_api.schemas.post import PostCreate, PostUpdate
from blog_api.schemas.user import ProfileUpdate, UserLogin, UserRegister, normalize_login


def first_message(model, data):
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(data)
    return format_validation_error(exc_info.value.errors())


VALID_USER = {
    "fullname": "Jane Doe",
    "username": "jane",
    "email": "jane@mail.com",
    "password": "secret123",
}


# ============================================================
# Registration
# ============================================================

@pytest.mark.parametrize("field", ["fullname", "username", "email"])
def test_register_requires_field(field):
    data = {k: v for k, v in VALID_USER.items() if k != field}
    assert first_message(UserRegister, data) == f'"{field}" is required'


def test_register_requires_password_without_social_id():
    data = {k: v for k, v in VALID_USER.items() if k != "password"}
    assert first_message(UserRegister, data) == '"password" is required'


def test_register_social_account_needs_no_password():
    data = {k: v for k, v in VALID_USER.items() if k != "password"}
    user = UserRegister.model_validate({**data, "social_id": "google-123"})
    assert user.password is None


def test_register_password_too_short():
    message = first_message(UserRegister, {**VALID_USER, "password": "abc"})
    assert message == '"password" length must be at least 6 characters long'


def test_register_invalid_email():
    message = first_message(UserRegister, {**VALID_USER, "email": "not-an-email"})
    assert message == '"email" must be a valid email'


def test_register_invalid_profile_pic():
    message = first_message(UserRegister, {**VALID_USER, "profile_pic": "just text"})
    assert message == '"profile_pic" must be a valid uri'


def test_register_blank_phone_becomes_none():
    user = UserRegister.model_validate({**VALID_USER, "phone": "  "})
    assert user.phone is None


# ============================================================
# Login
# ============================================================

@pytest.mark.parametrize("data, expected", [
    ({"password": "secret123"}, "Email or phone is required"),
    ({"login_email_phone": "  ", "password": "secret123"}, "Email or phone cannot be empty"),
    ({"login_email_phone": "jane@mail.com"}, "Password is required for normal login"),
    ({"login_email_phone": "jane@mail.com", "password": "abc"}, "Password must be at least 6 characters"),
])
def test_login_messages(data, expected):
    assert first_message(UserLogin, data) == expected


def test_login_social_skips_password():
    login = UserLogin.model_validate({"login_email_phone": "jane@mail.com", "social_id": "g-1"})
    assert login.password is None


@pytest.mark.parametrize("raw, expected", [
    ("Bob@Example.COM", "Bob@example.com"),
    ("  jane@mail.com ", "jane@mail.com"),
    ("5550001", "5550001"),
    ("not-an-email@", "not-an-email@"),
])
def test_login_email_is_normalized_like_registration(raw, expected):
    login = UserLogin.model_validate({"login_email_phone": raw, "password": "secret123"})
    assert login.login_email_phone == expected


def test_normalize_login_matches_registered_email():
    user = UserRegister.model_validate({**VALID_USER, "email": "Jane.Doe@MAIL.com"})
    assert normalize_login("Jane.Doe@MAIL.com") == user.email



# ============================================================
# Profile, posts, comments
# ============================================================

def test_profile_username_pattern():
    message = first_message(ProfileUpdate, {"username": "bad name!"})
    assert message == '"username" with value fails to match the required pattern'


def test_post_create_requires_title():
    assert first_message(PostCreate, {"content": "body"}) == '"title" is required'


def test_post_create_empty_image_url_is_none():
    post = PostCreate.model_validate({"title": "t", "content": "c", "image_url": ""})
    assert post.image_url is None


def test_post_create_category_must_be_number():
    message = first_message(PostCreate, {"title": "t", "content": "c", "category_id": "abc"})
    assert message == '"category_id" must be a number'


def test_post_create_image_url_too_long():
    url = "https://example.com/" + "a" * 300
    message = first_message(PostCreate, {"title": "t", "content": "c", "image_url": url})
    assert message == '"image_url" length must be less than or equal to 255 characters long'


def test_profile_pic_too_long():
    url = "https://example.com/" + "a" * 300
    message = first_message(ProfileUpdate, {"profile_pic": url})
    assert message == '"profile_pic" length must be less than or equal to 255 characters long'


def test_post_create_category_id_out_of_range():
    message = first_message(PostCreate, {"title": "t", "content": "c", "category_id": 2 ** 63})
    assert message == '"category_id" must be less than or equal to 2147483647'



def test_post_update_needs_a_field():
    assert first_message(PostUpdate, {}) == '"value" must have at least 1 key'


def test_post_update_only_sets_sent_fields():
    update = PostUpdate.model_validate({"title": "New"})
    assert update.model_dump(exclude_unset=True) == {"title": "New"}


def test_comment_requires_comment():
    assert first_message(CommentCreate, {"post_id": 1}) == '"comment" is required'


def test_comment_must_not_be_empty():
    message = first_message(CommentCreate, {"comment": "", "post_id": 1})
    assert message == '"comment" is not allowed to be empty'


def test_comment_post_id_out_of_range():
    message = first_message(CommentCreate, {"comment": "hi", "post_id": 10 ** 20})
    assert message == '"post_id" must be less than or equal to 2147483647'



# ============================================================
# Formatter edge cases
# ============================================================

def test_formatter_skips_location_prefix():
    errors = [{"type": "missing", "loc": ("body", "comment"), "msg": "Field required"}]
    assert format_validation_error(errors) == '"comment" is required'


def test_formatter_missing_body():
    errors = [{"type": "missing", "loc": ("body",), "msg": "Field required"}]
    assert format_validation_error(errors) == "Request body is required"


def test_formatter_no_errors():
    assert format_validation_error([]) == "Validation failed"
