"""User-facing error messages shared by every route."""

ADMIN_REQUIRED = "Administrator privileges are required"
LOGIN_REQUIRED = "Login is required"
PASSWORD_REQUIRED = "Password is required"
INVALID_PASSWORD = "Incorrect password"
CODE_REQUIRED = "QR code or ID is required"
INVALID_CODE = "Invalid QR code or ID"
SERVER_CONFIG_ERROR = "Server configuration error"
SERVER_ERROR = "A server error occurred"

QUESTION_ID_REQUIRED = "Question ID is required"
QUESTION_NOT_FOUND = "Question not found"
QUESTION_NUMBER_TAKEN = "A question with this number already exists"
QUESTION_NEEDS_CORRECT_CHOICE = "At least one choice must be marked correct"
QUESTION_NEEDS_CHOICES = "Choice questions need at least one choice"
NO_QUESTIONS = "There are no questions to run"

ALREADY_ANSWERED = "You have already answered this question"
CHOICE_REQUIRED = "Please select a choice"
CHOICE_NOT_IN_QUESTION = "Selected choice does not belong to this question"

PARTICIPANT_ID_REQUIRED = "Participant ID is required"
PARTICIPANT_NOT_FOUND = "Participant not found"
PARTICIPANT_FIELDS_REQUIRED = "Name and group are required"
CODE_GENERATION_FAILED = "Could not generate a unique participant code"

NICKNAME_REQUIRED = "Please enter a nickname"
NICKNAME_TOO_LONG = "Nickname must be 20 characters or fewer"
NICKNAME_EMOJI = "Emoji cannot be used in a nickname"
NICKNAME_TAKEN = "This nickname is already in use"

ACTION_ID_REQUIRED = "Action ID is required"
ACTION_NOT_FOUND = "Action not found"
ACTION_ALREADY_UNDONE = "This action has already been undone"

STATE_CONFLICT = "Game state was changed by another operation, reload and retry"
CANNOT_REVEAL = "Results can only be shown while a question is open"

CONFIRM_REQUIRED = "Confirmation parameter is required"
RESET_DONE = "Answer data and nicknames have been reset"

FILE_REQUIRED = "No file was selected"
UNSUPPORTED_IMAGE = "Only JPEG, PNG, GIF and WebP images can be uploaded"
FILE_TOO_LARGE = "File size must be 5MB or less"
FILE_NOT_FOUND = "File not found"
