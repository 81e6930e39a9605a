"""User-facing alert texts for the registration flow."""

LOGIN_REQUIRED = "You must be logged in to access this resource."
ACCESS_DENIED = "Access denied."
MASTER_ACCOUNT_NOT_EXISTS = "You cannot register an account until the master account has been created!"
ACCOUNT_REGISTRATION_DISABLED = "We're sorry, but account registration has been disabled."
ALREADY_LOGGED_IN = "I'm sorry, you cannot register for an account while logged in.  Please log out first."
CAPTCHA_FAIL = "Failed security question."
INVALID_GROUP_LIST = "Invalid group list '{groups}'."

ACCOUNT_USER_CHAR_LIMIT = "Your username must be between {min} and {max} characters in length."
ACCOUNT_USER_INVALID_CHARACTERS = "Username can only include alpha-numeric characters."
ACCOUNT_DISPLAY_CHAR_LIMIT = "Your display name must be between {min} and {max} characters in length."
ACCOUNT_INVALID_EMAIL = "Invalid email address."
ACCOUNT_PASS_CHAR_LIMIT = "Your password must be between {min} and {max} characters in length."
ACCOUNT_PASS_BYTE_LIMIT = "Your password cannot be longer than {max} bytes."
ACCOUNT_PASS_MISMATCH = "Your password and confirmation password must match."
ACCOUNT_USERNAME_IN_USE = "Username '{value}' is already in use."
ACCOUNT_EMAIL_IN_USE = "Email '{value}' is already in use."
ACCOUNT_CREATION_FAILED = "The account could not be created. Please try again later."
ACCOUNT_GROUPS_FAILED = "The account was created, but could not be added to all of its groups."

ACCOUNT_REGISTRATION_COMPLETE_TYPE1 = "You have successfully registered. You can now login."
ACCOUNT_REGISTRATION_COMPLETE_TYPE2 = (
    "You have successfully registered. You will soon receive an activation email. "
    "You must activate your account before logging in."
)
ACCOUNT_CREATION_COMPLETE = "Account for new user '{user_name}' has been created."
