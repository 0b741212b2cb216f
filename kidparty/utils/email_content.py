"""Subject/body builders for every email the service sends."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..models.enums import ReminderType, RSVPStatus
from .date_helpers import DateHelpers

SIGNATURE = "Best regards,\nKid Party RSVP Team"


@dataclass
class EmailContent:
    subject: str
    text: str
    html: Optional[str] = None


@dataclass
class PartyFacts:
    """What a guest-facing email needs to know about a party"""

    child_name: str
    child_age: int
    event_datetime: datetime
    location: str
    rsvp_url: str
    theme: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class GuestNames:
    parent_name: str
    child_name: str


@dataclass
class RSVPFacts:
    parent_name: str
    child_name: str
    status: RSVPStatus
    num_children: int
    parent_staying: bool
    allergies: Optional[str] = None
    message: Optional[str] = None


REMINDER_LEAD_TIME = {
    ReminderType.SEVEN_DAYS: "7 days",
    ReminderType.TWO_DAYS: "2 days",
    ReminderType.SAME_DAY: "today",
}

STATUS_EMOJI = {
    RSVPStatus.YES: "🎉",
    RSVPStatus.NO: "😢",
    RSVPStatus.MAYBE: "🤔",
}

STATUS_TEXT = {
    RSVPStatus.YES: "Yes, we'll be there!",
    RSVPStatus.NO: "Sorry, we can't make it",
    RSVPStatus.MAYBE: "Maybe, we'll try to make it",
}


def ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _party_details(party: PartyFacts) -> str:
    theme = f" ({party.theme} theme)" if party.theme else ""
    return (
        f"🎂 {party.child_name}'s {ordinal(party.child_age)} Birthday{theme}\n"
        f"📅 {DateHelpers.format_event_datetime(party.event_datetime)}\n"
        f"📍 {party.location}"
    )


def _notes_block(party: PartyFacts) -> str:
    return f"Special Notes: {party.notes}\n\n" if party.notes else ""


def generate_reminder_email(
    party: PartyFacts, guest: GuestNames, reminder_type: ReminderType
) -> EmailContent:
    if reminder_type == ReminderType.SAME_DAY:
        subject = f"Today: {party.child_name}'s Birthday Party!"
    else:
        subject = (
            f"Reminder: {party.child_name}'s Party in "
            f"{REMINDER_LEAD_TIME[reminder_type]}"
        )

    text = (
        f"Hi {guest.parent_name},\n\n"
        f"This is a friendly reminder about {party.child_name}'s "
        f"{ordinal(party.child_age)} birthday party!\n\n"
        f"Party Details:\n{_party_details(party)}\n\n"
        f"{_notes_block(party)}"
        f"Haven't RSVP'd yet? Please let us know: {party.rsvp_url}\n\n"
        f"Looking forward to celebrating with {guest.child_name}!\n\n"
        f"{SIGNATURE}"
    )
    return EmailContent(subject=subject, text=text)


def generate_invitation_email(party: PartyFacts, host_name: str) -> EmailContent:
    subject = f"You're invited to {party.child_name}'s Birthday Party!"
    text = (
        f"Hi there,\n\n"
        f"{host_name} has invited you to {party.child_name}'s "
        f"{ordinal(party.child_age)} birthday party!\n\n"
        f"Party Details:\n{_party_details(party)}\n\n"
        f"{_notes_block(party)}"
        f"Please RSVP here: {party.rsvp_url}\n\n"
        f"{SIGNATURE}"
    )
    return EmailContent(subject=subject, text=text)


def _attendance_summary(response: RSVPFacts) -> str:
    if response.status == RSVPStatus.YES:
        plural = "" if response.num_children == 1 else "ren"
        staying = (
            "A parent/guardian will be staying for the party."
            if response.parent_staying
            else "This will be a drop-off party for us."
        )
        return (
            f"Great! We're excited to celebrate with {response.child_name} "
            f"and {response.num_children} child{plural}.\n{staying}"
        )
    if response.status == RSVPStatus.MAYBE:
        return (
            f"Thank you for letting us know you might be able to make it. "
            f"We hope to see {response.child_name} there!"
        )
    return (
        f"Thank you for letting us know. We'll miss {response.child_name} "
        f"but hope to celebrate together next time!"
    )


def generate_rsvp_confirmation_email(
    party: PartyFacts, response: RSVPFacts
) -> EmailContent:
    subject = f"RSVP Confirmed: {party.child_name}'s Birthday Party"

    extras = ""
    if response.allergies:
        extras += f"⚠️ Allergies/Dietary Restrictions: {response.allergies}\n\n"
    if response.message:
        extras += f'💬 Your Message: "{response.message}"\n\n'

    text = (
        f"Hi {response.parent_name},\n\n"
        f"Thank you for your RSVP to {party.child_name}'s "
        f"{ordinal(party.child_age)} birthday party!\n\n"
        f"Your Response: {STATUS_EMOJI[response.status]} "
        f"{STATUS_TEXT[response.status]}\n\n"
        f"{_attendance_summary(response)}\n\n"
        f"Party Details:\n{_party_details(party)}\n\n"
        f"{_notes_block(party)}{extras}"
        f"Looking forward to celebrating together!\n\n"
        f"{SIGNATURE}"
    )
    return EmailContent(subject=subject, text=text)


def generate_host_rsvp_notification_email(
    party: PartyFacts, response: RSVPFacts
) -> EmailContent:
    subject = (
        f"New RSVP: {response.parent_name} replied "
        f"{response.status.value} for {party.child_name}'s party"
    )

    if response.status == RSVPStatus.YES:
        detail = (
            f"✅ Attending:\n"
            f"• Children: {response.num_children}\n"
            f"• Parent: {'staying' if response.parent_staying else 'drop-off'}\n"
        )
        if response.allergies:
            detail += f"• ⚠️ Allergies/dietary: {response.allergies}\n"
    elif response.status == RSVPStatus.MAYBE:
        detail = f"🤔 {response.parent_name} might attend; you may want to follow up.\n"
    else:
        detail = f"😢 {response.child_name} can't make it this time.\n"

    message = f'\n💬 Message: "{response.message}"\n' if response.message else ""

    text = (
        f"Hello!\n\n"
        f"You have a new RSVP:\n\n"
        f"👥 Guest: {response.parent_name} and {response.child_name}\n"
        f"📝 Reply: {STATUS_EMOJI[response.status]} {STATUS_TEXT[response.status]}\n\n"
        f"{detail}{message}\n"
        f"Party Details:\n{_party_details(party)}\n\n"
        f"You can see every reply on your party dashboard.\n\n"
        f"{SIGNATURE}"
    )
    return EmailContent(subject=subject, text=text)


def generate_photo_sharing_available_email(
    party: PartyFacts, guest: GuestNames
) -> EmailContent:
    subject = f"📷 Photos from {party.child_name}'s Birthday Party"
    text = (
        f"Hi {guest.parent_name},\n\n"
        f"Thanks for celebrating {party.child_name}'s "
        f"{ordinal(party.child_age)} birthday with us!\n\n"
        f"Photos from the party are now being shared. "
        f"You can view them and add your own here: {party.rsvp_url}\n\n"
        f"{SIGNATURE}"
    )
    return EmailContent(subject=subject, text=text)


def generate_birthday_party_reminder_email(
    child_name: str, upcoming_birthday: date, turning: int, parent_name: str
) -> EmailContent:
    subject = f"🎂 {child_name}'s birthday is coming up!"
    text = (
        f"Hi {parent_name},\n\n"
        f"{child_name} turns {turning} on "
        f"{upcoming_birthday.strftime('%B')} {upcoming_birthday.day}. "
        f"That's about three weeks away, a good time to plan the party "
        f"and send out invitations.\n\n"
        f"{SIGNATURE}"
    )
    return EmailContent(subject=subject, text=text)
