from vault.models.user import User, RoleEnum, AuthenticatorState
from vault.models.backup_code import BackupCode
