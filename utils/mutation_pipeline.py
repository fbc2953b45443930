"""
Authorization-aware mutation pipeline.

Every create, update and delete of a project or task goes through one
``MutationPipeline``:

    START -> AUTHORIZED -> PERSISTED -> LOGGED -> DONE

with an exit to FAILED when the gate denies or persistence fails.

Create and update append their activity entry after the entity is saved.
A failing append surfaces as a 500 even though the save already went
through, unless ``ACTIVITY_LOG_ATOMIC`` is on, in which case both happen in
one transaction.

Delete appends its entry *before* the destructive call, and a failing append
is logged and swallowed, so a deletion is never blocked by the log and a
logged deletion can exist for an entity whose delete then failed.
"""
import logging
from contextlib import nullcontext
from enum import Enum

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, transaction
from rest_framework.exceptions import NotFound

from project import activity_store
from project.permission import Operation, authorize
from utils.change_log import EntityLog
from utils.exceptions import InternalError

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    START = 'start'
    AUTHORIZED = 'authorized'
    PERSISTED = 'persisted'
    LOGGED = 'logged'
    DONE = 'done'
    FAILED = 'failed'


TRANSITIONS = {
    PipelineState.START: {PipelineState.AUTHORIZED, PipelineState.FAILED},
    PipelineState.AUTHORIZED: {PipelineState.PERSISTED, PipelineState.FAILED},
    PipelineState.PERSISTED: {PipelineState.LOGGED, PipelineState.FAILED},
    PipelineState.LOGGED: {PipelineState.DONE},
}


class MutationPipeline:

    def __init__(self, identity, log: EntityLog):
        self.identity = identity
        self.log = log
        self.state = PipelineState.START
        self.operation = None

    def _advance(self, state):
        if state not in TRANSITIONS.get(self.state, ()):
            raise RuntimeError(f"Invalid pipeline transition {self.state.value} -> {state.value}")
        self.state = state

    def authorize(self, operation: Operation, owner_id=None, message=None):
        decision = authorize(self.identity, owner_id, operation)
        if not decision:
            self._advance(PipelineState.FAILED)
            logger.info(
                f"{operation.value} {self.log.kind} denied for "
                f"{self.identity.id if self.identity else 'anonymous'}: {decision.reason.value}"
            )
            raise decision.to_exception(message)
        self.operation = operation
        self._advance(PipelineState.AUTHORIZED)

    def _require_authorized(self):
        if self.state is not PipelineState.AUTHORIZED:
            raise RuntimeError(f"Pipeline must be authorized before mutating, state is {self.state.value}")

    def _persist(self, mutate):
        try:
            result = mutate()
        except ObjectDoesNotExist as exc:
            self._advance(PipelineState.FAILED)
            raise NotFound(f"{self.log.kind} not found") from exc
        except DatabaseError as exc:
            self._advance(PipelineState.FAILED)
            raise InternalError() from exc
        self._advance(PipelineState.PERSISTED)
        return result

    def _append(self, action, instance, message):
        project_id, task_id = self.log.scope(instance)
        try:
            activity_store.append(project_id, action, message, task_id=task_id)
        except DatabaseError as exc:
            self._advance(PipelineState.FAILED)
            raise InternalError() from exc

    def _finish(self, result):
        self._advance(PipelineState.DONE)
        return result

    def _scope(self):
        return transaction.atomic() if settings.ACTIVITY_LOG_ATOMIC else nullcontext()

    def create(self, persist):
        """Run ``persist()`` (returns the new instance) and log the creation."""
        self._require_authorized()
        with self._scope():
            instance = self._persist(persist)
            self._append(self.log.created_action, instance, self.log.created_message(self.log.snapshot(instance)))
            self._advance(PipelineState.LOGGED)
        logger.info(f"{self.log.kind} {instance.pk} created by {self.identity.id}")
        return self._finish(instance)

    def update(self, instance, changes, persist):
        """
        Run ``persist()`` (returns the saved instance) and log what changed.

        ``changes`` holds the validated fields of the request; only those are
        diffed.
        """
        self._require_authorized()
        before = self.log.snapshot(instance)
        with self._scope():
            instance = self._persist(persist)
            message = self.log.updated_message(before, self.log.snapshot(instance), changes.keys())
            if message is not None:
                self._append(self.log.updated_action, instance, message)
            self._advance(PipelineState.LOGGED)
        logger.info(f"{self.log.kind} {instance.pk} updated by {self.identity.id}")
        return self._finish(instance)

    def delete(self, instance, destroy=None):
        """Log the deletion, then delete. The log write may fail, the delete proceeds."""
        self._require_authorized()
        pk = instance.pk
        try:
            self._append_before_destroy(instance)
        except Exception:
            logger.exception(f"Failed to create deletion log for {self.log.kind} {pk}")

        self._persist(destroy or instance.delete)
        self._advance(PipelineState.LOGGED)
        logger.info(f"{self.log.kind} {pk} deleted by {self.identity.id}")
        return self._finish(pk)

    def _append_before_destroy(self, instance):
        project_id, task_id = self.log.scope(instance)
        message = self.log.deleted_message(self.log.snapshot(instance))
        # own savepoint so a failed insert can't poison an enclosing transaction
        with transaction.atomic():
            activity_store.append(project_id, self.log.deleted_action, message, task_id=task_id)
