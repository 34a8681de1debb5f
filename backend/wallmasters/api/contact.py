"""Contact form endpoint."""
from fastapi import APIRouter

from wallmasters.errors import ServerFaultError
from wallmasters.schemas.auth import MessageResponse
from wallmasters.schemas.order import ContactMessage
from wallmasters.services import mailer

router = APIRouter(tags=["contact"])


@router.post("/send-email", response_model=MessageResponse)
def send_contact_email(contact: ContactMessage):
    if not mailer.send_contact_message(contact.name, contact.email, contact.comment):
        raise ServerFaultError("Email sending failed")
    return MessageResponse(message="Email sent successfully!")
