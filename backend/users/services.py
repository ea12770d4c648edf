DEFAULT_ACTOR = "admin"


def actor_id_for(user) -> str:
    """
    Opaque identity recorded on orders (created_by, completed_by, history).

    Admin and kitchen accounts are told apart upstream by the permission
    classes; the order records only who acted.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return DEFAULT_ACTOR
    if user.pk is not None:
        return str(user.pk)
    return getattr(user, "email", None) or DEFAULT_ACTOR
