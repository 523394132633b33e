from webapp.views.auth_handlers import (
    change_password as change_password,
)
from webapp.views.auth_handlers import (
    health as health,
)
from webapp.views.auth_handlers import (
    login as login,
)
from webapp.views.auth_handlers import (
    logout as logout,
)
from webapp.views.auth_handlers import (
    me as me,
)
from webapp.views.auth_handlers import (
    register as register,
)
