from storyverify.schemas.build import Account


def _billing_hint(account: Account) -> str:
    if account.billing_url:
        return f' Visit {account.billing_url} to review your plan.'
    return ''


def snapshot_quota_reached(account: Account) -> str:
    return (
        "Your account has reached its snapshot quota, this build won't be "
        'tested or reviewed.' + _billing_hint(account)
    )


def payment_required(account: Account) -> str:
    return (
        "Your account requires a payment, this build won't be tested or "
        'reviewed.' + _billing_hint(account)
    )


def build_limited(account: Account) -> str:
    return (
        "Your build was limited by the index, it won't be tested or reviewed."
        + _billing_hint(account)
    )
