from wren import SiteService


class FailService(SiteService):
    use_main_only = True

    def main(self):
        reason = self.failure.text if self.failure is not None else "Nothing here"
        return f"<h1>Not found</h1><p>{reason}</p>"
