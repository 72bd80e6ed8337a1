"""In-memory user directory for tests."""

from ordering.directory.port import UserContact, UserDirectory


class FakeUserDirectory(UserDirectory):
    def __init__(self, contacts=None):
        self._contacts = {}
        for contact in contacts or []:
            self.add(contact)

    def add(self, contact: UserContact):
        self._contacts[str(contact.user_id)] = contact

    def lookup(self, user_id):
        if not user_id:
            return None
        return self._contacts.get(str(user_id))
