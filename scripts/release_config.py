import os

USAGE = '''Usage: GITHUB_TOKEN=<token> GITHUB_REPOSITORY=<owner/repo> RELEASE_TAG=<tag> \\
       GPG_KEY_ID=<key id> GPG_KEY_PASSPHRASE=<passphrase> sign-release

  REPO_OWNER=<owner> REPO_NAME=<repo> may be given instead of GITHUB_REPOSITORY.

Optional:
  GPG_PINENTRY_LOOPBACK  true|false, pass the passphrase to gpg (default true)
  GNUPGHOME              keyring directory
  GPG_TIMEOUT            seconds allowed per gpg call (default 10)
  RELEASE_WORKDIR        directory for downloaded assets and signatures
  GITHUB_API_URL, GITHUB_SERVER_URL, GITHUB_UPLOADS_URL'''

DEFAULT_TIMEOUT = 10

def get_repository(environ):
    full = environ.get('GITHUB_REPOSITORY')
    if full:
        owner, _, repo = full.partition('/')
        if not owner or not repo or '/' in repo:
            raise SystemExit(f'GITHUB_REPOSITORY must be <owner>/<repo>, got {full}\n\n{USAGE}')
        return owner, repo

    owner = environ.get('REPO_OWNER')
    repo = environ.get('REPO_NAME')
    if not owner or not repo:
        raise SystemExit(USAGE)
    return owner, repo

def get_flag(environ, name, default):
    value = environ.get(name)
    if value is None or value == '':
        return default
    if value.lower() in ('1', 'true', 'yes', 'on'):
        return True
    if value.lower() in ('0', 'false', 'no', 'off'):
        return False
    raise SystemExit(f'{name} must be true or false, got {value}\n\n{USAGE}')

def get_timeout(environ):
    value = environ.get('GPG_TIMEOUT')
    if not value:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(value)
    except ValueError:
        raise SystemExit(f'GPG_TIMEOUT must be a number of seconds, got {value}\n\n{USAGE}')
    if timeout <= 0:
        raise SystemExit(f'GPG_TIMEOUT must be positive, got {value}\n\n{USAGE}')
    return timeout

def usage(environ=None):
    if environ is None:
        environ = os.environ

    required = {
        'token': 'GITHUB_TOKEN',
        'tag': 'RELEASE_TAG',
        'key_id': 'GPG_KEY_ID',
    }
    config = {}
    for key, name in required.items():
        value = environ.get(name)
        if not value:
            raise SystemExit(USAGE)
        config[key] = value

    config['owner'], config['repo'] = get_repository(environ)

    config['loopback'] = get_flag(environ, 'GPG_PINENTRY_LOOPBACK', True)
    config['passphrase'] = environ.get('GPG_KEY_PASSPHRASE')
    # gpg-agent supplies the passphrase when loopback is off
    if config['loopback'] and not config['passphrase']:
        raise SystemExit(USAGE)

    config['gnupghome'] = environ.get('GNUPGHOME') or None
    config['timeout'] = get_timeout(environ)
    config['workdir'] = environ.get('RELEASE_WORKDIR') or os.getcwd()
    config['api_url'] = environ.get('GITHUB_API_URL', 'https://api.github.com').rstrip('/')
    config['server_url'] = environ.get('GITHUB_SERVER_URL', 'https://github.com').rstrip('/')
    config['uploads_url'] = environ.get('GITHUB_UPLOADS_URL', 'https://uploads.github.com').rstrip('/')
    return config
