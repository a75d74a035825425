"""Tests for Release entity and Hook."""

from datetime import datetime, UTC

import pytest

from conftest import FIRST_DEPLOYED, make_release
from rewind.domain.entities.hook import Hook, HookDeletePolicy, HookEvent
from rewind.domain.entities.release import ChartRef, Release, ReleaseStatus

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class TestReleaseStatus:
    @pytest.mark.parametrize(
        "status",
        [
            ReleaseStatus.PENDING_INSTALL,
            ReleaseStatus.PENDING_UPGRADE,
            ReleaseStatus.PENDING_ROLLBACK,
        ],
    )
    def test_pending(self, status):
        assert status.is_pending()

    @pytest.mark.parametrize(
        "status",
        [ReleaseStatus.DEPLOYED, ReleaseStatus.FAILED, ReleaseStatus.SUPERSEDED],
    )
    def test_not_pending(self, status):
        assert not status.is_pending()

    def test_str_is_wire_value(self):
        assert str(ReleaseStatus.PENDING_ROLLBACK) == "pending-rollback"


class TestReleaseCreation:
    def test_defaults(self):
        release = Release(name="app", revision=1)
        assert release.namespace == "default"
        assert release.status is ReleaseStatus.UNKNOWN
        assert release.hooks == ()
        assert release.chart is None

    @pytest.mark.parametrize("revision", [0, -1])
    def test_revision_must_be_positive(self, revision):
        with pytest.raises(ValueError, match="must be positive"):
            Release(name="app", revision=revision)

    def test_frozen(self):
        release = make_release()
        with pytest.raises(AttributeError):
            release.status = ReleaseStatus.FAILED

    def test_repr(self):
        release = make_release("app", 3, ReleaseStatus.DEPLOYED)
        assert "revision=3" in repr(release)
        assert "status=deployed" in repr(release)

    def test_chart_str(self):
        assert str(ChartRef("web", "1.2.0")) == "web-1.2.0"
        assert str(ChartRef("web")) == "web"


class TestTransitions:
    def test_supersede_returns_new_instance(self):
        release = make_release("app", 5, ReleaseStatus.DEPLOYED)
        superseded = release.supersede()
        assert superseded.status is ReleaseStatus.SUPERSEDED
        assert release.status is ReleaseStatus.DEPLOYED
        assert superseded.description == release.description

    def test_deploy_from_pending(self):
        release = make_release("app", 6, ReleaseStatus.PENDING_ROLLBACK)
        assert release.deploy().status is ReleaseStatus.DEPLOYED

    def test_deploy_requires_pending(self):
        with pytest.raises(ValueError, match="pending"):
            make_release("app", 2, ReleaseStatus.FAILED).deploy()

    def test_fail_sets_description(self):
        release = make_release("app", 6, ReleaseStatus.PENDING_ROLLBACK)
        failed = release.fail('Rollback "app" failed: boom')
        assert failed.status is ReleaseStatus.FAILED
        assert failed.description == 'Rollback "app" failed: boom'

    def test_fail_requires_pending(self):
        with pytest.raises(ValueError):
            make_release("app", 2, ReleaseStatus.DEPLOYED).fail("nope")

    def test_with_status_keeps_description_by_default(self):
        release = make_release("app", 2)
        assert release.with_status(ReleaseStatus.UNKNOWN).description == release.description


class TestRollbackDraft:
    def test_copies_content_of_source(self):
        hook = Hook(
            name="migrate",
            kind="Job",
            manifest="kind: Job",
            events=(HookEvent.PRE_ROLLBACK,),
        )
        current = make_release("app", 5, ReleaseStatus.DEPLOYED, namespace="web")
        source = make_release("app", 3, hooks=(hook,))

        draft = current.rollback_draft(source, now=NOW)

        assert draft.name == "app"
        assert draft.namespace == "web"
        assert draft.revision == 6
        assert draft.status is ReleaseStatus.PENDING_ROLLBACK
        assert draft.manifest == source.manifest
        assert draft.chart == source.chart
        assert draft.config == source.config
        assert draft.hooks == (hook,)
        assert draft.notes == source.notes
        assert draft.description == "Rollback to 3"

    def test_keeps_first_deployed_of_current(self):
        current = make_release("app", 2, ReleaseStatus.DEPLOYED)
        source = make_release("app", 1, first_deployed=NOW)
        draft = current.rollback_draft(source, now=NOW)
        assert draft.first_deployed == FIRST_DEPLOYED
        assert draft.last_deployed == NOW

    def test_config_is_copied(self):
        current = make_release("app", 2, ReleaseStatus.DEPLOYED)
        source = make_release("app", 1)
        draft = current.rollback_draft(source, now=NOW)
        assert draft.config == source.config
        assert draft.config is not source.config

    def test_defaults_to_current_time(self):
        current = make_release("app", 2, ReleaseStatus.DEPLOYED)
        draft = current.rollback_draft(make_release("app", 1))
        assert draft.last_deployed is not None
        assert draft.last_deployed > FIRST_DEPLOYED


class TestReleaseSerialization:
    def test_to_dict(self):
        release = make_release("app", 2, ReleaseStatus.DEPLOYED)
        data = release.to_dict()
        assert data["status"] == "deployed"
        assert data["chart"] == {"name": "app", "version": "1.2.0", "app_version": ""}
        assert data["first_deployed"] == FIRST_DEPLOYED.isoformat()

    def test_from_dict_restores_release(self):
        hook = Hook(
            name="smoke",
            kind="Pod",
            manifest="kind: Pod",
            events=(HookEvent.POST_ROLLBACK,),
            weight=-5,
            delete_policies=(HookDeletePolicy.HOOK_SUCCEEDED,),
        )
        release = make_release("app", 4, ReleaseStatus.FAILED, hooks=(hook,))
        assert Release.from_dict(release.to_dict()) == release

    def test_from_dict_defaults(self):
        release = Release.from_dict({"name": "app", "revision": "3"})
        assert release.revision == 3
        assert release.status is ReleaseStatus.UNKNOWN
        assert release.chart is None
        assert release.last_deployed is None


class TestHook:
    def test_bound_to(self):
        hook = Hook(
            name="h",
            kind="Job",
            manifest="",
            events=(HookEvent.PRE_ROLLBACK, HookEvent.PRE_UPGRADE),
        )
        assert hook.bound_to(HookEvent.PRE_ROLLBACK)
        assert not hook.bound_to(HookEvent.POST_ROLLBACK)

    def test_default_delete_policy(self):
        hook = Hook(name="h", kind="Job", manifest="")
        assert hook.effective_delete_policies() == (
            HookDeletePolicy.BEFORE_HOOK_CREATION,
        )

    def test_declared_delete_policies(self):
        hook = Hook(
            name="h",
            kind="Job",
            manifest="",
            delete_policies=(HookDeletePolicy.HOOK_FAILED,),
        )
        assert hook.effective_delete_policies() == (HookDeletePolicy.HOOK_FAILED,)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            Hook(name="", kind="Job", manifest="")

    def test_from_dict_rejects_unknown_event(self):
        with pytest.raises(ValueError):
            Hook.from_dict({"name": "h", "events": ["pre-nothing"]})
