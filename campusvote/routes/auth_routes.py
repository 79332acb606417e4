from fastapi import APIRouter, Depends, HTTPException, Response

from campusvote import config
from campusvote.schemas import AdminLoginRequest, AdminLoginResponse, LoginRequest, LoginResponse, StudentOut
from campusvote.security import AdminIdentity, Identity, create_access_token, get_current_identity, verify_password
from campusvote.storage_mongo import MongoStorage, get_storage

auth_router = APIRouter(prefix="/auth", tags=["Auth"])


@auth_router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, response: Response, storage: MongoStorage = Depends(get_storage)):
    student = storage.get_student_by_index_number(body.index_number)
    if student is None or not verify_password(body.password, student.password_hash):
        raise HTTPException(status_code=401, detail="Invalid index number or password")

    token = create_access_token(Identity(student_id=student.id))
    response.set_cookie(
        config.TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
        max_age=config.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return LoginResponse(
        message="Login successful",
        token=token,
        user=StudentOut.model_validate(student.model_dump()),
    )


@auth_router.post("/logout")
def logout(response: Response):
    response.delete_cookie(config.TOKEN_COOKIE_NAME, path="/")
    return {"message": "Logged out"}


@auth_router.get("/me")
def me(identity: Identity = Depends(get_current_identity), storage: MongoStorage = Depends(get_storage)):
    student = storage.get_student(identity.student_id)
    if student is None:
        raise HTTPException(status_code=401, detail="User not found")
    return {"user": StudentOut.model_validate(student.model_dump()).model_dump(by_alias=True)}


@auth_router.post("/admin/login", response_model=AdminLoginResponse)
def admin_login(body: AdminLoginRequest, storage: MongoStorage = Depends(get_storage)):
    admin = storage.get_admin_by_username(body.username)
    if admin is None or not verify_password(body.password, admin.password_hash):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return AdminLoginResponse(message="Login successful", token=create_access_token(AdminIdentity(admin_id=admin.id)))
