from datetime import datetime

from campus_recruit.services.email_templates import render_interview_invite, render_offer_letter

SENT_AT = datetime(2024, 5, 1, 9, 30)


def test_offer_letter_content():
    email = render_offer_letter("Ada", "Acme", "Backend Engineer", sent_at=SENT_AT)

    assert email.subject == "Congratulations! Acme accepted your application"
    for part in (email.html, email.text):
        assert "Ada" in part
        assert "Acme" in part
        assert "Backend Engineer" in part
        assert "ACCEPTED" in part
        assert "2024-05-01 09:30" in part


def test_offer_letter_escapes_html_but_not_text():
    email = render_offer_letter("Ada <b>", "R&D Labs", "C++ <Dev>")

    assert "R&amp;D Labs" in email.html
    assert "C++ &lt;Dev&gt;" in email.html
    assert "<b>" not in email.html
    assert "R&D Labs" in email.text
    assert "C++ <Dev>" in email.text


def test_interview_invite_includes_note():
    email = render_interview_invite("Ada", "Acme", "Backend Engineer", note="Tuesday 10am, room 4")

    assert email.subject == "Interview Invitation: Backend Engineer at Acme"
    assert "Tuesday 10am, room 4" in email.html
    assert "Details: Tuesday 10am, room 4" in email.text


def test_interview_invite_without_note_has_no_details_block():
    email = render_interview_invite("Ada", "Acme", "Backend Engineer")

    assert "Note from company" not in email.html
    assert "Details:" not in email.text


def test_interview_note_is_escaped_in_html():
    note = '<script>alert("x")</script>'
    email = render_interview_invite("Ada", "Acme", "Backend Engineer", note=note)

    assert "<script>" not in email.html
    assert "&lt;script&gt;" in email.html
    assert note in email.text


def test_subjects_stay_on_one_line():
    invite = render_interview_invite("Ada", "Acme\r\nLabs", "Backend Engineer\nPune office")
    offer = render_offer_letter("Ada", "Acme\nLabs", "Backend Engineer")

    assert invite.subject == "Interview Invitation: Backend Engineer Pune office at Acme Labs"
    assert offer.subject == "Congratulations! Acme Labs accepted your application"
    assert "Backend Engineer\nPune office" in invite.text
