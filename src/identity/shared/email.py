"""EmailAddress value object for validated, case-normalized email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from identity.domain import identity


@identity.value_object
class EmailAddress:
    """A structurally valid email address.

    Build it with ``EmailAddress.normalized(raw)`` so that addresses differing
    only by case or surrounding whitespace compare equal.
    """

    address: String(required=True, max_length=254)

    @classmethod
    def normalized(cls, raw):
        return cls(address=(raw or "").strip().lower())

    @invariant.post
    def verify_email_address(self):
        email = self.address

        def _reject():
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            _reject()

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            _reject()
        if not domain_part or "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            _reject()
        if ".." in email:
            _reject()
        if any(label.startswith("-") or label.endswith("-") for label in domain_part.split(".")):
            _reject()
        for forbidden in (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\"):
            if forbidden in email:
                _reject()
