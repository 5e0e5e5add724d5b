import os
import threading

import gnupg

LOOPBACK_OPTIONS = ['--pinentry-mode', 'loopback']

def check_gpg(config):
    # --yes: a rerun overwrites the .asc files left by a previous run
    options = ['--yes']
    if config['loopback']:
        options += LOOPBACK_OPTIONS
    try:
        gpg = gnupg.GPG(gnupghome=config['gnupghome'], options=options)
    except (OSError, ValueError) as e:
        raise SystemExit(f'GPG not found: {e}')
    if not gpg.version:
        raise SystemExit('GPG not found: no version reported by gpg')

    if not gpg.list_keys(keys=config['key_id']):
        raise SystemExit(f'GPG key not found: {config["key_id"]}')
    return gpg

def run_with_timeout(timeout, description, func, *args, **kwargs):
    # daemon thread: a gpg stuck on pinentry must not block interpreter exit
    outcome = {}

    def target():
        try:
            outcome['result'] = func(*args, **kwargs)
        except BaseException as e:
            outcome['error'] = e

    t = threading.Thread(target=target, name=description, daemon=True)
    t.start()
    t.join(timeout)
    if t.is_alive():
        raise SystemExit(f'{description} timed out after {timeout}s')
    if 'error' in outcome:
        raise outcome['error']
    return outcome['result']

def sign_asset(gpg, config, path):
    name = os.path.basename(path)
    sig_path = path + '.asc'
    passphrase = config['passphrase'] if config['loopback'] else None

    def sign():
        with open(path, 'rb') as stream:
            return gpg.sign_file(stream, keyid=config['key_id'], passphrase=passphrase,
                                 clearsign=False, detach=True, binary=False,
                                 output=sig_path)

    try:
        signed = run_with_timeout(config['timeout'], f'gpg sign {name}', sign)
    except OSError as e:
        raise SystemExit(f'Failed to sign {name}: {e}')
    if not signed or not os.path.exists(sig_path):
        raise SystemExit(f'Failed to sign {name}: {signed.status}\n{signed.stderr}')
    return sig_path

def verify_signature(gpg, config, path, sig_path):
    name = os.path.basename(sig_path)

    def verify():
        with open(sig_path, 'rb') as stream:
            return gpg.verify_file(stream, data_filename=path)

    try:
        verified = run_with_timeout(config['timeout'], f'gpg verify {name}', verify)
    except OSError as e:
        raise SystemExit(f'Failed to verify {name}: {e}')
    if not verified:
        raise SystemExit(f'Failed to verify {name}: {verified.status}\n{verified.stderr}')
    return verified

def sign_and_verify(gpg, config, path):
    sig_path = sign_asset(gpg, config, path)
    verify_signature(gpg, config, path, sig_path)
    return sig_path
