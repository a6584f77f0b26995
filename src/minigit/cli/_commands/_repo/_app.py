from cyclopts import App

app = App(name="repo", help="Manage and browse hosted repositories", help_on_error=True)
