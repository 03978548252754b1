from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Security, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials

from .auth.config import DEFAULT_AUTH_CONFIG, AuthConfig
from .auth.dependencies import (
    get_auth_config,
    optional_user_id,
    require_self,
    require_user_id,
    security,
)
from .auth.models import (
    AuthResponse,
    DebugResetPasswordRequest,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    MessageResponse,
    PreferencesUpdate,
    ProfilePictureUpdate,
    ProfileUpdate,
    ResetPasswordRequest,
    SignupRequest,
    UserResponse,
)
from .auth.tokens import InvalidTokenError, decode_token, issue_token
from .auth.users import (
    authenticate,
    check_password,
    force_reset_password,
    register_user,
    request_password_reset,
    reset_password,
    user_out,
)
from .config import DEFAULT_APP_CONFIG, AppConfig
from .mealdb.client import MealDBClient, MealDBError
from .mealdb.config import DEFAULT_MEALDB_CONFIG, MealDBConfig
from .mealdb.importer import fetch_meals, import_meals
from .pantry import service as pantry_service
from .pantry.models import IngredientsResponse, PantryItemsRequest, PantryResponse
from .store import Graph, GraphStore, StoreError, build_graph, get_store
from .store.config import DEFAULT_STORE_CONFIG, StoreConfig
from .suggestions import catalog
from .suggestions.models import (
    CategoriesResponse,
    CreateRecipeRequest,
    CreateRecipeResponse,
    FetchWebRequest,
    FetchWebResponse,
    LikeResponse,
    RecipeDetail,
    RecipeListResponse,
    SuggestionRequest,
    SuggestionResponse,
)
from .suggestions.ranking import suggest_recipes
from .users import profile

logger = logging.getLogger(__name__)


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.app_config


def get_mealdb(request: Request) -> MealDBClient:
    return request.app.state.mealdb


# ── Auth endpoints ───────────────────────────────────────────────────────

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@auth_router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    store: GraphStore = Depends(get_store),
    config: AuthConfig = Depends(get_auth_config),
) -> AuthResponse:
    user = register_user(store, body.email, body.password, body.name, config)
    return AuthResponse(token=issue_token(user.id, user.email, config), user=user_out(user))


@auth_router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    store: GraphStore = Depends(get_store),
    config: AuthConfig = Depends(get_auth_config),
) -> AuthResponse:
    user = authenticate(store, body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return AuthResponse(token=issue_token(user.id, user.email, config), user=user_out(user))


@auth_router.get("/me", response_model=UserResponse)
def auth_me(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    store: GraphStore = Depends(get_store),
    config: AuthConfig = Depends(get_auth_config),
) -> UserResponse:
    if not credentials:
        raise HTTPException(status_code=401, detail="No token provided")
    try:
        payload = decode_token(credentials.credentials, config)
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user = profile.get_user_or_404(store, payload["userId"])
    return UserResponse(user=user_out(user))


@auth_router.post("/forgot-password", response_model=ForgotPasswordResponse, response_model_exclude_none=True)
def forgot_password(
    body: ForgotPasswordRequest,
    store: GraphStore = Depends(get_store),
    config: AuthConfig = Depends(get_auth_config),
    app_config: AppConfig = Depends(get_app_config),
) -> ForgotPasswordResponse:
    message = "If an account exists with this email, a password reset link has been sent."
    token = request_password_reset(store, body.email, config)
    if token is None or not app_config.is_development:
        return ForgotPasswordResponse(message=message)
    return ForgotPasswordResponse(
        message=message,
        reset_token=token,
        reset_link=f"{app_config.frontend_url.rstrip('/')}/reset-password?token={token}",
    )


@auth_router.post("/reset-password", response_model=MessageResponse)
def reset_password_endpoint(
    body: ResetPasswordRequest,
    store: GraphStore = Depends(get_store),
    config: AuthConfig = Depends(get_auth_config),
) -> MessageResponse:
    reset_password(store, body.token, body.new_password, config)
    return MessageResponse(message="Password has been reset successfully")


# ── Development-only auth endpoints ──────────────────────────────────────

auth_debug_router = APIRouter(prefix="/api/auth/debug", tags=["debug"])


@auth_debug_router.post("/check-password")
def debug_check_password(body: LoginRequest, store: GraphStore = Depends(get_store)) -> dict:
    return check_password(store, body.email, body.password)


@auth_debug_router.post("/reset-password", response_model=MessageResponse)
def debug_reset_password(
    body: DebugResetPasswordRequest,
    store: GraphStore = Depends(get_store),
    config: AuthConfig = Depends(get_auth_config),
) -> MessageResponse:
    email = force_reset_password(store, body.email, body.new_password, config)
    return MessageResponse(message=f"Password reset successfully for {email}")


@auth_debug_router.get("/users")
def debug_users(store: GraphStore = Depends(get_store)) -> dict:
    return {
        "users": [
            {
                "id": u.id,
                "email": u.email,
                "name": u.name,
                "hasPassword": bool(u.password),
                "createdAt": u.created_at,
            }
            for u in store.list_users()
        ]
    }


# ── User endpoints ───────────────────────────────────────────────────────

users_router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(require_self)])


@users_router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, store: GraphStore = Depends(get_store)) -> UserResponse:
    return UserResponse(user=user_out(profile.get_user_or_404(store, user_id)))


@users_router.put("/{user_id}/preferences", response_model=UserResponse)
def update_preferences(
    user_id: str, body: PreferencesUpdate, store: GraphStore = Depends(get_store)
) -> UserResponse:
    user = profile.update_preferences(store, user_id, body.dietary_preferences, body.allergies)
    return UserResponse(user=user_out(user))


@users_router.put("/{user_id}/profile", response_model=UserResponse)
def update_profile(
    user_id: str, body: ProfileUpdate, store: GraphStore = Depends(get_store)
) -> UserResponse:
    user = profile.update_profile(store, user_id, body.model_dump(include=body.model_fields_set))
    return UserResponse(user=user_out(user))


@users_router.put("/{user_id}/profile-picture", response_model=UserResponse)
def update_profile_picture(
    user_id: str, body: ProfilePictureUpdate, store: GraphStore = Depends(get_store)
) -> UserResponse:
    user = profile.set_profile_picture(store, user_id, body.profile_picture)
    return UserResponse(user=user_out(user))


@users_router.delete("/{user_id}/profile-picture", response_model=UserResponse)
def delete_profile_picture(user_id: str, store: GraphStore = Depends(get_store)) -> UserResponse:
    user = profile.set_profile_picture(store, user_id, None)
    return UserResponse(user=user_out(user))


@users_router.get("/{user_id}/debug")
def user_preference_debug(user_id: str, store: GraphStore = Depends(get_store)) -> dict:
    return profile.preference_diagnostics(store, user_id)


# ── Pantry endpoints ─────────────────────────────────────────────────────

pantry_router = APIRouter(prefix="/api/pantry", tags=["pantry"])


@pantry_router.get("/ingredients/all", response_model=IngredientsResponse)
def all_ingredients(store: GraphStore = Depends(get_store)) -> IngredientsResponse:
    return pantry_service.all_ingredients(store)


@pantry_router.get("/{user_id}", response_model=PantryResponse, dependencies=[Depends(require_self)])
def get_pantry(user_id: str, store: GraphStore = Depends(get_store)) -> PantryResponse:
    return pantry_service.get_pantry(store, user_id)


@pantry_router.post("/{user_id}/items", response_model=PantryResponse, dependencies=[Depends(require_self)])
def add_pantry_items(
    user_id: str, body: PantryItemsRequest, store: GraphStore = Depends(get_store)
) -> PantryResponse:
    return pantry_service.add_items(store, user_id, body.items)


@pantry_router.delete("/{user_id}/items", response_model=PantryResponse, dependencies=[Depends(require_self)])
def remove_pantry_items(
    user_id: str, body: PantryItemsRequest, store: GraphStore = Depends(get_store)
) -> PantryResponse:
    return pantry_service.remove_items(store, user_id, body.items)


# ── Recipe endpoints ─────────────────────────────────────────────────────

recipes_router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@recipes_router.post("/suggestions", response_model=SuggestionResponse)
def suggestions(
    body: SuggestionRequest,
    store: GraphStore = Depends(get_store),
    user_id: str | None = Depends(optional_user_id),
) -> SuggestionResponse:
    return suggest_recipes(store, body.pantry_items, user_id=user_id)


@recipes_router.get("", response_model=RecipeListResponse, response_model_exclude_none=True)
def list_recipes(store: GraphStore = Depends(get_store)) -> RecipeListResponse:
    return catalog.list_recipes(store)


@recipes_router.post("", response_model=CreateRecipeResponse, status_code=status.HTTP_201_CREATED)
def create_recipe(
    body: CreateRecipeRequest,
    store: GraphStore = Depends(get_store),
    user_id: str = Depends(require_user_id),
) -> CreateRecipeResponse:
    return CreateRecipeResponse(recipe=catalog.create_recipe(store, body, user_id))


@recipes_router.get("/liked", response_model=RecipeListResponse)
def liked_recipes(
    store: GraphStore = Depends(get_store),
    user_id: str = Depends(require_user_id),
) -> RecipeListResponse:
    return catalog.liked_recipes(store, user_id)


@recipes_router.post("/fetch-web", response_model=FetchWebResponse)
def fetch_web_recipes(
    body: FetchWebRequest,
    store: GraphStore = Depends(get_store),
    client: MealDBClient = Depends(get_mealdb),
    user_id: str = Depends(require_user_id),
) -> FetchWebResponse:
    try:
        meals = fetch_meals(client, body.search_term, body.category)
    except MealDBError:
        raise HTTPException(status_code=502, detail="Failed to fetch recipes from web")
    imported = import_meals(store, meals, user_id=user_id, limit=client.config.max_ingredients)
    return FetchWebResponse(message=f"Fetched and stored {len(imported)} recipes", recipes=imported)


@recipes_router.get("/web/categories", response_model=CategoriesResponse)
def web_categories(client: MealDBClient = Depends(get_mealdb)) -> CategoriesResponse:
    try:
        return CategoriesResponse(categories=client.categories())
    except MealDBError:
        raise HTTPException(status_code=502, detail="Failed to fetch categories")


@recipes_router.get("/{recipe_id}", response_model=RecipeDetail)
def recipe_details(recipe_id: str, store: GraphStore = Depends(get_store)) -> RecipeDetail:
    return catalog.get_recipe_detail(store, recipe_id)


@recipes_router.post("/{recipe_id}/like", response_model=LikeResponse)
def like_recipe(
    recipe_id: str,
    store: GraphStore = Depends(get_store),
    user_id: str = Depends(require_user_id),
) -> LikeResponse:
    return catalog.like_recipe(store, user_id, recipe_id)


@recipes_router.delete("/{recipe_id}/like", response_model=LikeResponse)
def unlike_recipe(
    recipe_id: str,
    store: GraphStore = Depends(get_store),
    user_id: str = Depends(require_user_id),
) -> LikeResponse:
    return catalog.unlike_recipe(store, user_id, recipe_id)


# ── Application factory ──────────────────────────────────────────────────


def create_app(
    graph: Graph | None = None,
    app_config: AppConfig = DEFAULT_APP_CONFIG,
    auth_config: AuthConfig = DEFAULT_AUTH_CONFIG,
    store_config: StoreConfig = DEFAULT_STORE_CONFIG,
    mealdb_config: MealDBConfig = DEFAULT_MEALDB_CONFIG,
) -> FastAPI:
    """
    Build the API around a graph connection pool.

    The pool is created here (or passed in) and shared by every request
    through ``app.state``; the lifespan initializes and closes it.
    """
    graph = graph if graph is not None else build_graph(store_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        graph.initialize(seed=store_config.seed_data)
        yield
        graph.close()

    app = FastAPI(title="Pantry Recipes API", version="1.0.0", lifespan=lifespan)
    app.state.graph = graph
    app.state.app_config = app_config
    app.state.auth_config = auth_config
    app.state.mealdb = MealDBClient(mealdb_config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_config.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
        content = {"detail": "Internal server error"}
        if app_config.is_development:
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "message": "Pantry recipes API is running"}

    app.include_router(auth_router)
    if app_config.is_development:
        app.include_router(auth_debug_router)
        logger.warning("Debug endpoints enabled (APP_ENV=development)")
    app.include_router(users_router)
    app.include_router(pantry_router)
    app.include_router(recipes_router)
    return app
