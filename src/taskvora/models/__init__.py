from taskvora.models.user import User
from taskvora.models.app_password import AppPassword
from taskvora.models.reminder import Reminder
from taskvora.models.uploaded_file import UploadedFile
from taskvora.models.email_log import EmailLog

__all__ = ["User", "AppPassword", "Reminder", "UploadedFile", "EmailLog"]
