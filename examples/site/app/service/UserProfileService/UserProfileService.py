from wren import SiteService


class UserProfileService(SiteService):
    def main(self):
        return "<h1>Profiles</h1>"

    def doEditName(self, user_id, field="name"):
        return f"<p>Editing {field} of user {user_id}</p>"
