from mentorhub.core.email_service.email_service import EmailService

email_service = EmailService()
