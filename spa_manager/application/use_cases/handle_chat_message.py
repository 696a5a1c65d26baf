from __future__ import annotations

import logging
import time
from decimal import Decimal

from spa_manager.application.exceptions import (
    AppointmentNotFound,
    AppointmentStateError,
    ParseError,
    StoreError,
    ValidationFailed,
)
from spa_manager.application.ports.chat_session_store import ChatSessionStorePort
from spa_manager.application.use_cases.booking import BookingUseCase, parse_tip_reply
from spa_manager.application.use_cases.interpret_command import InterpretCommandUseCase
from spa_manager.domain.entities.appointment import Appointment
from spa_manager.domain.entities.chat_state import (
    ChatSessionState,
    PendingCancellation,
    PendingCompletion,
)
from spa_manager.domain.entities.intent import (
    AffirmativeIntent,
    AppointmentCommand,
    CancelIntent,
    CommandIntent,
    NoIntent,
    StopIntent,
    intent_to_wire,
)
from spa_manager.domain.entities.reply import ChatReply

REPHRASE_TEXT = "There is something wrong with your request. Can you double-check and make the request again?"
ERROR_TEXT = "Sorry, I encountered an error while checking for the appointment. Please try again."
NOT_FOUND_TEXT = (
    "Sorry, I couldn't find an open appointment for that client at that time. "
    "It may have already been {done} or doesn't exist."
)
TIP_QUESTION = "What was the tip amount? (You can say 0, none, or the dollar amount)"
FALLBACK_TEXT = (
    "I can help cancel or complete appointments. Try: "
    "\"cancel the appointment for Jane Doe at 2:00 PM on August 19th\"."
)


def describe_tip(tip: Decimal) -> str:
    return "no tip" if tip == 0 else f"tip: ${tip:.2f}"


class HandleChatMessageUseCase:
    """
    Drives the chat appointment dialogues.

    Cancel: find the appointment, ask for a yes, cancel.
    Complete: find the appointment, ask for the tip, ask for a yes, complete.
    """

    def __init__(
        self,
        sessions: ChatSessionStorePort,
        interpreter: InterpretCommandUseCase,
        booking: BookingUseCase,
        cancel_reason: str = "Cancelled via chat assistant",
    ) -> None:
        self._sessions = sessions
        self._interpreter = interpreter
        self._booking = booking
        self._cancel_reason = cancel_reason
        self._logger = logging.getLogger(__name__)

    def handle(self, text: str, session_id: str | None = None, year_hint: str | None = None) -> ChatReply:
        sid = self._sessions.get_or_create(session_id)
        state = self._sessions.get_state(sid)

        intent = self._interpreter.execute(text, year_hint=year_hint or state.last_year)
        self._logger.info("Chat message classified", extra={"session_id": sid, "intent": intent.type})

        if isinstance(intent, StopIntent):
            self._save(sid, ChatSessionState(last_intent=intent.type, last_year=state.last_year))
            return self._reply(sid, "stop", "Okay, I'll stop here.", intent)

        if isinstance(intent, AppointmentCommand):
            return self._handle_lookup(sid, state, intent)

        if isinstance(intent, AffirmativeIntent):
            return self._handle_affirmative(sid, state, intent)

        pending = state.pending_completion
        if pending is not None and pending.tip is None:
            return self._handle_tip(sid, state, pending, text, intent)

        self._save(sid, self._with(state, last_intent=intent.type))
        return self._reply(sid, "fallback", FALLBACK_TEXT, intent)

    def _handle_lookup(self, sid: str, state: ChatSessionState, intent: AppointmentCommand) -> ChatReply:
        cleared = self._with(state, last_intent=intent.type, pending_cancellation=None, pending_completion=None)
        if intent.missing_fields:
            self._save(sid, cleared)
            missing = " and ".join(intent.missing_fields)
            verb = "cancel" if isinstance(intent, CancelIntent) else "complete"
            text = f"To {verb} {intent.client_name}'s appointment I also need the {missing}."
            return self._reply(sid, "ask_details", text, intent, missing=intent.missing_fields)

        try:
            matches = self._booking.search_open_appointments(
                intent.client_name, intent.time, intent.date, intent.year
            )
        except ParseError as e:
            self._logger.info(
                "Could not parse appointment details",
                extra={"session_id": sid, "reason": str(e)},
            )
            return self._reply(sid, "rephrase", REPHRASE_TEXT, intent, original_input=e.original_input)
        except StoreError:
            self._logger.exception("Appointment search failed", extra={"session_id": sid})
            return self._reply(sid, "error", ERROR_TEXT, intent)

        if not matches:
            self._save(sid, cleared)
            done = "cancelled" if isinstance(intent, CancelIntent) else "completed"
            return self._reply(sid, "not_found", NOT_FOUND_TEXT.format(done=done), intent)

        appointment = matches[0]
        found = f"I found an appointment for {appointment.client} at {appointment.time} on {appointment.date}."
        last_year = intent.year or state.last_year

        if isinstance(intent, CancelIntent):
            self._save(
                sid,
                self._with(cleared, pending_cancellation=self._pending_cancellation(appointment), last_year=last_year),
            )
            text = f"{found} Type 'yes' to confirm cancellation."
            return self._reply(sid, "confirm_cancel", text, intent, appointment_id=appointment.id)

        self._save(
            sid,
            self._with(cleared, pending_completion=self._pending_completion(appointment), last_year=last_year),
        )
        text = f"{found} To complete it, I need the tip amount. {TIP_QUESTION}"
        return self._reply(sid, "ask_tip", text, intent, appointment_id=appointment.id)

    def _handle_tip(
        self,
        sid: str,
        state: ChatSessionState,
        pending: PendingCompletion,
        text: str,
        intent: NoIntent,
    ) -> ChatReply:
        try:
            tip = parse_tip_reply(text)
        except ValidationFailed as e:
            return self._reply(sid, "invalid_tip", str(e), intent, appointment_id=pending.appointment_id)

        self._save(
            sid,
            self._with(
                state,
                last_intent="tip",
                pending_completion=PendingCompletion(
                    appointment_id=pending.appointment_id,
                    client=pending.client,
                    time=pending.time,
                    date=pending.date,
                    tip=tip,
                ),
            ),
        )
        amount = "no tip" if tip == 0 else f"${tip:.2f}"
        text = f"Tip amount set to: {amount}. Type 'yes' to confirm completion."
        return self._reply(
            sid, "confirm_complete", text, intent, appointment_id=pending.appointment_id, tip=float(tip)
        )

    def _handle_affirmative(self, sid: str, state: ChatSessionState, intent: AffirmativeIntent) -> ChatReply:
        if state.pending_cancellation is not None:
            return self._confirm_cancellation(sid, state, state.pending_cancellation, intent)

        completion = state.pending_completion
        if completion is not None and completion.tip is None:
            return self._reply(sid, "ask_tip", TIP_QUESTION, intent, appointment_id=completion.appointment_id)
        if completion is not None:
            return self._confirm_completion(sid, state, completion, intent)

        self._save(sid, self._with(state, last_intent=intent.type))
        text = "I don't have any pending action to confirm. Please make a request first."
        return self._reply(sid, "nothing_pending", text, intent)

    def _confirm_cancellation(
        self,
        sid: str,
        state: ChatSessionState,
        pending: PendingCancellation,
        intent: AffirmativeIntent,
    ) -> ChatReply:
        try:
            self._booking.cancel_appointment(pending.appointment_id, self._cancel_reason)
        except (AppointmentNotFound, AppointmentStateError) as e:
            self._save(sid, self._with(state, last_intent=intent.type, pending_cancellation=None))
            return self._reply(sid, "not_found", f"I couldn't cancel that appointment: {e}", intent)
        except StoreError:
            self._logger.exception(
                "Cancellation failed", extra={"session_id": sid, "appointment_id": pending.appointment_id}
            )
            return self._reply(sid, "error", ERROR_TEXT, intent)

        self._save(sid, self._with(state, last_intent=intent.type, pending_cancellation=None))
        text = f"The appointment for {pending.client} at {pending.time} on {pending.date} has been cancelled."
        return self._reply(sid, "cancelled", text, intent, appointment_id=pending.appointment_id)

    def _confirm_completion(
        self,
        sid: str,
        state: ChatSessionState,
        pending: PendingCompletion,
        intent: AffirmativeIntent,
    ) -> ChatReply:
        try:
            self._booking.complete_appointment(pending.appointment_id, tip=pending.tip)
        except (AppointmentNotFound, AppointmentStateError) as e:
            self._save(sid, self._with(state, last_intent=intent.type, pending_completion=None))
            return self._reply(sid, "not_found", f"I couldn't complete that appointment: {e}", intent)
        except StoreError:
            self._logger.exception(
                "Completion failed", extra={"session_id": sid, "appointment_id": pending.appointment_id}
            )
            return self._reply(sid, "error", ERROR_TEXT, intent)

        self._save(sid, self._with(state, last_intent=intent.type, pending_completion=None))
        text = (
            f"I successfully completed the appointment for {pending.client} at {pending.time} "
            f"on {pending.date} with {describe_tip(pending.tip)}."
        )
        return self._reply(
            sid, "completed", text, intent, appointment_id=pending.appointment_id, tip=float(pending.tip)
        )

    def _pending_cancellation(self, appointment: Appointment) -> PendingCancellation:
        return PendingCancellation(
            appointment_id=appointment.id,
            client=appointment.client,
            time=appointment.time,
            date=appointment.date,
        )

    def _pending_completion(self, appointment: Appointment) -> PendingCompletion:
        return PendingCompletion(
            appointment_id=appointment.id,
            client=appointment.client,
            time=appointment.time,
            date=appointment.date,
        )

    def _with(self, state: ChatSessionState, **changes) -> ChatSessionState:
        values = {
            "last_intent": state.last_intent,
            "pending_cancellation": state.pending_cancellation,
            "pending_completion": state.pending_completion,
            "last_year": state.last_year,
        }
        values.update(changes)
        return ChatSessionState(**values, updated_at=time.time())

    def _save(self, sid: str, state: ChatSessionState) -> None:
        self._sessions.set_state(sid, state)

    def _reply(self, sid: str, action: str, text: str, intent: CommandIntent, **meta) -> ChatReply:
        return ChatReply(session_id=sid, action=action, text=text, intent=intent_to_wire(intent), meta=meta)
