"""SaaS backend CLI tool (saasctl)."""

import logging

import typer

app = typer.Typer(name="saasctl", help="SaaS backend CLI")
db_app = typer.Typer(help="Database management commands")
roles_app = typer.Typer(help="Role commands")
app.add_typer(db_app, name="db")
app.add_typer(roles_app, name="roles")

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


@db_app.command("create")
def db_create():
    """Create all tables that do not exist yet."""
    import saas_backend.models  # noqa: F401
    from saas_backend.db.base import Base
    from saas_backend.db.session import engine

    Base.metadata.create_all(bind=engine)
    typer.echo(f"Tables created on {engine.url.render_as_string(hide_password=True)}")


@db_app.command("seed")
def db_seed(
    admin: bool = typer.Option(True, help="Also create the admin person from ADMIN_* settings"),
):
    """Seed default roles and the admin person."""
    from saas_backend.db.session import SessionLocal
    from saas_backend.db.seeds.seed_roles import seed_default_roles
    from saas_backend.db.seeds.seed_admin import seed_admin

    db = SessionLocal()
    try:
        created = seed_default_roles(db)
        typer.echo(f"Roles created: {', '.join(r.value for r in created) or 'none'}")
        if admin:
            person = seed_admin(db)
            if person is not None:
                typer.echo(f"Admin created: {person.email}")
    finally:
        db.close()


@db_app.command("reset")
def db_reset():
    """Drop and recreate all tables (DANGER)."""
    confirm = typer.confirm("This will DROP every table. Continue?")
    if not confirm:
        raise typer.Abort()
    import saas_backend.models  # noqa: F401
    from saas_backend.db.base import Base
    from saas_backend.db.session import engine

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    typer.echo("Tables reset")


@roles_app.command("defaults")
def roles_defaults():
    """Print the default permission set of each role."""
    from saas_backend.core.permissions import RoleName, get_default_permissions

    for role_name in RoleName:
        perms = get_default_permissions(role_name)
        typer.echo(f"{role_name.value}:")
        for perm in perms:
            typer.echo(f"  - {perm.value}")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(True, help="Auto-reload"),
):
    """Start the FastAPI development server."""
    import uvicorn
    uvicorn.run("saas_backend.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
