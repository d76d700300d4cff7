import asyncio
import smtplib
import time

from campus_recruit.core.config import get_settings
from campus_recruit.services import mailer as mailer_module
from campus_recruit.services.email_templates import render_interview_invite, render_offer_letter
from campus_recruit.services.mailer import SmtpMailer, get_mailer
from campus_recruit.services.notifications import (
    NotificationDispatcher, NotificationKind, OutboundEvent,
)

ARGS = {"student_name": "Ada", "company_name": "Acme", "job_title": "Backend Engineer"}


class ListMailer:
    def __init__(self):
        self.sent = []

    def send(self, to, email):
        self.sent.append((to, email))


class BrokenMailer:
    def send(self, to, email):
        raise smtplib.SMTPException("connection refused")


class SlowMailer:
    def send(self, to, email):
        time.sleep(0.5)


def test_dispatch_sends_rendered_offer():
    transport = ListMailer()
    result = asyncio.run(
        NotificationDispatcher(transport).dispatch(NotificationKind.OFFER, "ada@example.com", ARGS)
    )

    assert result.delivered
    assert result.error is None
    [(to, email)] = transport.sent
    assert to == "ada@example.com"
    assert email.subject == "Congratulations! Acme accepted your application"


def test_dispatch_interview_carries_message():
    transport = ListMailer()
    args = dict(ARGS, message="Bring your laptop")
    asyncio.run(
        NotificationDispatcher(transport).dispatch(NotificationKind.INTERVIEW_INVITE, "ada@example.com", args)
    )

    [(_, email)] = transport.sent
    assert "Bring your laptop" in email.text


def test_transport_failure_is_reported_not_raised():
    result = asyncio.run(
        NotificationDispatcher(BrokenMailer()).dispatch(NotificationKind.OFFER, "ada@example.com", ARGS)
    )

    assert not result.delivered
    assert "connection refused" in result.error


def test_slow_transport_times_out():
    dispatcher = NotificationDispatcher(SlowMailer(), timeout=0.05)
    result = asyncio.run(dispatcher.dispatch(NotificationKind.OFFER, "ada@example.com", ARGS))

    assert not result.delivered
    assert result.error == "timeout"


def test_deliver_without_event_is_a_no_op():
    transport = ListMailer()
    assert asyncio.run(NotificationDispatcher(transport).deliver(None)) is None
    assert transport.sent == []


def test_deliver_event():
    transport = ListMailer()
    event = OutboundEvent(
        kind=NotificationKind.INTERVIEW_INVITE, to="ada@example.com",
        student_name="Ada", company_name="Acme", job_title="Backend Engineer", message="",
    )
    result = asyncio.run(NotificationDispatcher(transport).deliver(event))

    assert result.delivered
    assert result.kind == NotificationKind.INTERVIEW_INVITE
    [(_, email)] = transport.sent
    assert email.subject == "Interview Invitation: Backend Engineer at Acme"


def test_dispatcher_picks_up_swapped_mailer(outbox):
    dispatcher = NotificationDispatcher()
    asyncio.run(dispatcher.dispatch(NotificationKind.OFFER, "ada@example.com", ARGS))
    assert len(outbox.sent) == 1


def test_smtp_message_is_multipart_alternative():
    mailer = SmtpMailer(get_settings())
    message = mailer.build_message("ada@example.com", render_offer_letter("Ada", "Acme", "Backend Engineer"))

    assert message["To"] == "ada@example.com"
    assert message["Subject"] == "Congratulations! Acme accepted your application"
    assert message.get_content_type() == "multipart/alternative"
    subtypes = [part.get_content_subtype() for part in message.iter_parts()]
    assert subtypes == ["plain", "html"]


def test_smtp_mailer_without_host_only_logs(monkeypatch):
    def refuse(*args, **kwargs):
        raise AssertionError("should not connect")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    mailer = SmtpMailer(get_settings())

    assert not mailer.enabled
    mailer.send("ada@example.com", render_offer_letter("Ada", "Acme", "Backend Engineer"))


def test_get_mailer_is_a_singleton():
    mailer_module.set_mailer(None)
    try:
        assert get_mailer() is get_mailer()
        assert isinstance(get_mailer(), SmtpMailer)
    finally:
        mailer_module.set_mailer(None)


def test_multi_line_job_title_still_builds_a_message():
    mailer = SmtpMailer(get_settings())
    email = render_interview_invite("Ada", "Acme\nLabs", "Backend Engineer\nPune office", note="Room 4")

    message = mailer.build_message("ada@example.com", email)

    assert message["Subject"] == "Interview Invitation: Backend Engineer Pune office at Acme Labs"


def test_multi_line_job_title_is_delivered():
    args = {"student_name": "Ada", "company_name": "Acme", "job_title": "Backend Engineer\nPune office"}
    dispatcher = NotificationDispatcher(SmtpMailer(get_settings()))

    result = asyncio.run(dispatcher.dispatch(NotificationKind.INTERVIEW_INVITE, "ada@example.com", args))

    assert result.delivered
    assert result.error is None
