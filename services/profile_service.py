"""Field mapping between the users table and the profile API shape.

work_tags is stored as comma-joined text; everything above the storage
boundary sees a list.
"""

from database import User
from models import ProfileRequest, ProfileView

# API field -> users column
PROFILE_COLUMNS = {
    "name": "name",
    "phone": "phone",
    "age": "age",
    "ageGroup": "age_group",
    "dob": "dob",
    "country": "country",
    "state": "state",
    "city": "city",
    "pincode": "pincode",
    "role": "role",
}


def split_tags(value: str | None) -> list[str]:
    if not value:
        return []
    return [tag for tag in value.split(",") if tag]


def join_tags(value: list[str] | str | None) -> str | None:
    if isinstance(value, list):
        tags = value
    elif value:
        tags = [value]
    else:
        tags = []
    return ",".join(tags) or None


def to_profile_view(user: User) -> ProfileView:
    fields = {
        api_name: str(getattr(user, column) or "")
        for api_name, column in PROFILE_COLUMNS.items()
    }
    return ProfileView(
        id=user.id,
        email=user.email,
        workTags=split_tags(user.work_tags),
        **fields,
    )


def to_profile_columns(request: ProfileRequest) -> dict:
    """Column values for a profile overwrite; omitted or empty fields become NULL."""
    columns = {}
    for api_name, column in PROFILE_COLUMNS.items():
        value = getattr(request, api_name)
        columns[column] = str(value) if value not in (None, "") else None
    columns["work_tags"] = join_tags(request.workTags)
    return columns
