import logging
import re
from contextlib import asynccontextmanager
from pathlib import Path
from urllib.parse import quote

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import (
    HTMLResponse,
    JSONResponse,
    PlainTextResponse,
    RedirectResponse,
)
from fastapi.templating import Jinja2Templates

from . import crud
from .config import Settings, get_settings
from .errors import CookbookError, DecodeError, NotFound, ParseError, StorageError
from .forms import recipe_from_form, split_tags
from .ingredients import parse_ingredients
from .schemas import IngredientText, Recipe
from .search import search_all
from .serializer import render

logger = logging.getLogger(__name__)

router = APIRouter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create the data directory once at startup
    Path(app.state.settings.data_dir).mkdir(parents=True, exist_ok=True)
    yield


def get_data_dir(request: Request) -> Path:
    return Path(request.app.state.settings.data_dir)


def _check_path_value(request: Request, value: str) -> str:
    if not request.app.state.title_pattern.fullmatch(value) or not value.strip():
        raise HTTPException(status_code=404, detail="Not Found")
    return value


def valid_title(request: Request, title: str) -> str:
    return _check_path_value(request, title)


def valid_tag(request: Request, tag: str) -> str:
    return _check_path_value(request, tag)


def redirect_to(prefix: str, title: str = "") -> RedirectResponse:
    return RedirectResponse(prefix + quote(title), status_code=302)


async def form_value(request: Request, name: str) -> str:
    # form body wins over the query string
    if request.method == "POST":
        form = await request.form()
        if name in form:
            return str(form[name])
    return request.query_params.get(name, "")


def render_template(request: Request, name: str, context: dict):
    return request.app.state.templates.TemplateResponse(request, name, context)


@router.get("/", response_class=HTMLResponse)
def read_root(request: Request, data_dir: Path = Depends(get_data_dir)):
    titles = crud.list_titles(data_dir)
    return render_template(request, "main.html", {"titles": titles})


@router.get("/view/{title}", response_class=HTMLResponse)
def view_recipe(
    request: Request,
    title: str = Depends(valid_title),
    data_dir: Path = Depends(get_data_dir),
):
    try:
        recipe = crud.get_recipe(data_dir, title)
    except (NotFound, DecodeError):
        return redirect_to("/edit/", title)
    return render_template(
        request, "view.html", {"recipe": recipe, "key": title}
    )


@router.get("/text/{title}", response_class=PlainTextResponse)
def view_recipe_text(
    title: str = Depends(valid_title), data_dir: Path = Depends(get_data_dir)
):
    try:
        recipe = crud.get_recipe(data_dir, title)
    except (NotFound, DecodeError):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return PlainTextResponse(render(recipe))


@router.api_route("/add/", methods=["GET", "POST"])
async def add_recipe(request: Request):
    title = await form_value(request, "title")
    try:
        key = crud.title_key(title)
    except ValueError:
        return redirect_to("/")
    return redirect_to("/edit/", key)


@router.get("/edit/{title}", response_class=HTMLResponse)
def edit_recipe_form(
    request: Request,
    title: str = Depends(valid_title),
    data_dir: Path = Depends(get_data_dir),
):
    try:
        recipe = crud.get_recipe(data_dir, title)
    except (NotFound, DecodeError):
        recipe = Recipe(title=title)
    return render_template(
        request, "edit.html", {"recipe": recipe, "key": title}
    )


@router.post("/save/{title}")
def save_recipe(
    title: str = Depends(valid_title),
    new_title: str = Form("", alias="title"),
    ingredients: str = Form(""),
    steps: str = Form(""),
    image: str = Form(""),
    source: str = Form(""),
    tags: str = Form(""),
    data_dir: Path = Depends(get_data_dir),
):
    try:
        crud.title_key(new_title)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    recipe = recipe_from_form(new_title, ingredients, steps, image, source, tags)
    key = crud.save_recipe(data_dir, recipe, previous_title=title)
    return redirect_to("/view/", key)


@router.api_route("/delete/{title}", methods=["GET", "POST"])
def delete_recipe(
    title: str = Depends(valid_title), data_dir: Path = Depends(get_data_dir)
):
    crud.delete_recipe(data_dir, title)
    return redirect_to("/")


async def _search(request: Request, data_dir: Path, tags: list):
    """Render the documents carrying every tag from the path and form.

    All tags must match, not just the first one.
    """
    tags = tags + split_tags(await form_value(request, "tags"))
    if not tags:
        raise HTTPException(status_code=404, detail="Not Found")
    try:
        titles = search_all(data_dir, tags)
    except StorageError as e:
        logger.error("Search for %s failed (%s)", tags, e)
        raise HTTPException(status_code=404, detail=str(e))
    return render_template(
        request, "results.html", {"tags": tags, "titles": titles}
    )


@router.api_route(
    "/search/", methods=["GET", "POST"], response_class=HTMLResponse
)
async def search_recipes(
    request: Request, data_dir: Path = Depends(get_data_dir)
):
    return await _search(request, data_dir, [])


@router.api_route(
    "/search/{tag}", methods=["GET", "POST"], response_class=HTMLResponse
)
async def search_recipes_by_tag(
    request: Request,
    tag: str = Depends(valid_tag),
    data_dir: Path = Depends(get_data_dir),
):
    return await _search(request, data_dir, split_tags(tag))


@router.get("/api/recipes")
def api_list_recipes(data_dir: Path = Depends(get_data_dir)):
    return {"items": crud.list_titles(data_dir)}


@router.get("/api/recipes/{title}")
def api_get_recipe(
    title: str = Depends(valid_title), data_dir: Path = Depends(get_data_dir)
):
    try:
        recipe = crud.get_recipe(data_dir, title)
    except (NotFound, DecodeError):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return JSONResponse(content=recipe.model_dump(by_alias=True))


@router.put("/api/recipes/{title}")
def api_update_recipe(
    recipe: Recipe,
    title: str = Depends(valid_title),
    data_dir: Path = Depends(get_data_dir),
):
    try:
        crud.title_key(recipe.title)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    key = crud.save_recipe(data_dir, recipe, previous_title=title)
    content = recipe.model_dump(by_alias=True)
    headers = {"Location": "/api/recipes/" + quote(key)}
    return JSONResponse(content=content, headers=headers)


@router.delete("/api/recipes/{title}")
def api_delete_recipe(
    title: str = Depends(valid_title), data_dir: Path = Depends(get_data_dir)
):
    return {"deleted": crud.delete_recipe(data_dir, title)}


@router.post("/api/ingredients/parse")
def api_parse_ingredients(body: IngredientText):
    try:
        ingredients = parse_ingredients(body.text)
    except ParseError as e:
        return JSONResponse(
            status_code=400,
            content={"detail": str(e), "line": e.lineno, "column": e.column},
        )
    return {"ingredients": [i.model_dump(by_alias=True) for i in ingredients]}


async def parse_error_handler(request: Request, exc: ParseError):
    logger.info("Rejected ingredients: %s", exc)
    return PlainTextResponse(str(exc), status_code=400)


async def cookbook_error_handler(request: Request, exc: CookbookError):
    return PlainTextResponse(str(exc), status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the web application from ``settings``.

    Templates and the path pattern hang off ``app.state`` so each app
    (and each test) carries its own configuration.
    """
    settings = settings or get_settings()
    app = FastAPI(title="cookbook", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=str(settings.templates_dir))
    app.state.title_pattern = re.compile(settings.title_pattern)
    app.add_exception_handler(ParseError, parse_error_handler)
    app.add_exception_handler(CookbookError, cookbook_error_handler)
    app.include_router(router)
    return app


app = create_app()
