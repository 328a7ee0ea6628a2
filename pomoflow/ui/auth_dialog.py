"""Sign-in / sign-up dialog."""

from __future__ import annotations

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QLineEdit, QPushButton, QWidget,
)

from ..auth import AuthService
from ..errors import AuthError


class AuthDialog(QDialog):
    """Collects credentials and hands them to the auth service.

    Rejected credentials are shown inline; the dialog closes only once
    somebody is signed in.
    """

    def __init__(self, auth: AuthService, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Sign in to PomoFlow")
        self.setMinimumWidth(360)
        self.setModal(True)
        self._auth = auth
        self._build_ui()

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(12)

        form = QFormLayout()
        self._email_input = QLineEdit()
        self._email_input.setPlaceholderText("you@example.com")
        form.addRow("Email:", self._email_input)

        self._password_input = QLineEdit()
        self._password_input.setEchoMode(QLineEdit.EchoMode.Password)
        form.addRow("Password:", self._password_input)
        root.addLayout(form)

        self._message_label = QLabel("")
        self._message_label.setWordWrap(True)
        root.addWidget(self._message_label)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        sign_up_btn = QPushButton("Sign Up")
        sign_up_btn.setObjectName("secondaryButton")
        sign_up_btn.clicked.connect(self.sign_up)
        sign_in_btn = QPushButton("Sign In")
        sign_in_btn.setObjectName("primaryButton")
        sign_in_btn.setDefault(True)
        sign_in_btn.clicked.connect(self.sign_in)
        btn_row.addWidget(sign_up_btn)
        btn_row.addWidget(sign_in_btn)
        root.addLayout(btn_row)

    def set_credentials(self, email: str, password: str) -> None:
        self._email_input.setText(email)
        self._password_input.setText(password)

    def sign_in(self) -> bool:
        try:
            self._auth.sign_in(self._email_input.text(), self._password_input.text())
        except AuthError as exc:
            self._message_label.setText(str(exc))
            return False
        self.accept()
        return True

    def sign_up(self) -> bool:
        try:
            principal = self._auth.sign_up(
                self._email_input.text(), self._password_input.text(),
            )
        except AuthError as exc:
            self._message_label.setText(str(exc))
            return False
        if principal is None:
            self._message_label.setText(
                "Check your email to confirm the account, then sign in."
            )
            return False
        self.accept()
        return True

    @property
    def message(self) -> str:
        return self._message_label.text()
