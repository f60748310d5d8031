from flask import Blueprint, render_template, redirect, url_for, flash, abort, current_app
from ..auth import build_gate
from ..errors import InvalidCredentials, RegistrationClosed, ValidationFailed
from ..forms import LoginForm, LogoutForm, RegisterForm

account_bp = Blueprint('account', __name__, url_prefix='/Account')


@account_bp.route('/Register', methods=['GET'])
def register():
    gate = build_gate()
    if not gate.registration_open():
        abort(403, description=RegistrationClosed.message)
    return render_template('account/register.html', form=RegisterForm())


@account_bp.route('/Register', methods=['POST'])
def register_post():
    form = RegisterForm()
    gate = build_gate()
    if not gate.registration_open():
        abort(403, description=RegistrationClosed.message)
    if form.validate_on_submit():
        try:
            result = gate.attempt_register(form.email.data, form.password.data)
        except RegistrationClosed as exc:
            abort(403, description=exc.message)
        except ValidationFailed as exc:
            for message in exc.messages:
                flash(message, 'register')
        else:
            current_app.logger.info('Registered %s as %s', result.session.email, result.role)
            return redirect(url_for('home.index'))
    return render_template('account/register.html', form=form)


@account_bp.route('/Login', methods=['GET', 'POST'])
def login():
    form = LoginForm()
    if form.validate_on_submit():
        try:
            build_gate().login(form.email.data, form.password.data,
                               remember_me=bool(form.remember_me.data))
        except InvalidCredentials as exc:
            flash(exc.message, 'login')
        else:
            return redirect(url_for('home.index'))
    return render_template('account/login.html', form=form)


@account_bp.route('/Logout', methods=['POST'])
def logout():
    form = LogoutForm()
    if form.validate_on_submit():
        build_gate().logout()
    return redirect(url_for('home.index'))
