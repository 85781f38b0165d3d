import logging

import pytest

from conftest import make_build_payload
from storyverify.policy import (
    LimitReason,
    apply_build_response,
    apply_early_exit,
    classify_limit,
    is_onboarding,
    is_publish_only,
)
from storyverify.schemas.build import Build


def make_build(**overrides) -> Build:
    return Build.model_validate(make_build_payload(**overrides))


def test_not_limited():
    assert classify_limit(make_build(account={'exceededThreshold': True})) is None


@pytest.mark.parametrize('payment_required', [True, False])
def test_quota_wins_over_payment(payment_required):
    build = make_build(
        wasLimited=True,
        account={'exceededThreshold': True, 'paymentRequired': payment_required},
    )

    assert classify_limit(build) is LimitReason.quota
    assert LimitReason.quota.exit_code == 101


def test_payment_required():
    build = make_build(wasLimited=True, account={'paymentRequired': True})

    assert classify_limit(build) is LimitReason.payment
    assert LimitReason.payment.exit_code == 102


def test_unknown_limit_reason():
    assert classify_limit(make_build(wasLimited=True)) is LimitReason.unknown
    assert LimitReason.unknown.exit_code == 100


@pytest.mark.parametrize(
    'ui_tests, ui_review, expected',
    [(False, False, True), (True, False, False), (False, True, False), (True, True, False)],
)
def test_publish_only(ui_tests, ui_review, expected):
    build = make_build(features={'uiTests': ui_tests, 'uiReview': ui_review})

    assert is_publish_only(build) is expected


@pytest.mark.parametrize('local_auto_accept', [True, False])
def test_first_build_is_onboarding(local_auto_accept):
    assert is_onboarding(make_build(number=1), local_auto_accept)


def test_server_auto_accept_diverging_from_local_is_onboarding():
    build = make_build(autoAcceptChanges=True)

    assert is_onboarding(build, auto_accept_changes=False)
    assert not is_onboarding(build, auto_accept_changes=True)
    assert not is_onboarding(make_build(), auto_accept_changes=False)


def test_apply_build_response_records_limit(make_ctx, caplog):
    build = make_build(
        wasLimited=True,
        account={'exceededThreshold': True, 'billingUrl': 'https://index.example/billing'},
    )

    with caplog.at_level(logging.WARNING, logger='storyverify.policy'):
        ctx = apply_build_response(make_ctx(), build, auto_accept_changes=False)

    assert ctx.exit_code == 101
    assert ctx.build == build
    assert 'snapshot quota' in caplog.text
    assert 'https://index.example/billing' in caplog.text


def test_apply_build_response_keeps_exit_code_when_not_limited(make_ctx):
    ctx = apply_build_response(make_ctx(), make_build(), auto_accept_changes=False)

    assert ctx.exit_code is None
    assert not ctx.is_publish_only
    assert not ctx.is_onboarding


def test_publish_only_overrides_limit_exit_code(make_ctx):
    build = make_build(
        wasLimited=True,
        account={'paymentRequired': True},
        features={'uiTests': False, 'uiReview': False},
    )

    ctx = apply_early_exit(apply_build_response(make_ctx(), build, False))

    assert ctx.is_publish_only
    assert ctx.exit_code == 0
    assert ctx.skip_snapshots


def test_exit_once_uploaded_branch(make_ctx):
    ctx = apply_build_response(
        make_ctx(exit_once_uploaded='feature/*'), make_build(), False
    )

    ctx = apply_early_exit(ctx)

    assert ctx.exit_code == 0
    assert ctx.skip_snapshots


def test_no_early_exit(make_ctx):
    ctx = apply_build_response(make_ctx(exit_once_uploaded='main'), make_build(), False)

    assert apply_early_exit(ctx) == ctx
