import os
import sys
import json

from release_config import get_repository
from release_info import resolve, get_asset_list, build_asset_set

def std_display(assets):
    for a in assets:
        print(a)

def json_display(assets):
    print(json.dumps(assets))

def display_assets(assets):
    if sys.stdout.isatty():
        std_display(assets)
    else:
        json_display(assets)

def list_assets(config, signing_set=False):
    release = resolve(config)
    if signing_set:
        assets = build_asset_set(release, config['tag'], config['repo'], config['owner'],
                                 config['server_url'])
    else:
        assets = get_asset_list(config, release['id'])
    names = [a['name'] for a in assets]
    display_assets(names)
    return names

def usage(argv, environ):
    usage = f'Usage: GITHUB_TOKEN=<token> GITHUB_REPOSITORY=<owner/repo> {argv[0]} [--signing-set] <tag>'

    token = environ.get('GITHUB_TOKEN')
    if token is None:
        raise SystemExit(usage)

    args = argv[1:]
    signing_set = '--signing-set' in args
    if signing_set:
        args.remove('--signing-set')
    if len(args) != 1:
        raise SystemExit(usage)

    owner, repo = get_repository(environ)
    config = {
        'token': token,
        'owner': owner,
        'repo': repo,
        'tag': args[0],
        'api_url': environ.get('GITHUB_API_URL', 'https://api.github.com').rstrip('/'),
        'server_url': environ.get('GITHUB_SERVER_URL', 'https://github.com').rstrip('/'),
    }
    return config, signing_set

def main(argv=None, environ=None):
    if argv is None:
        argv = sys.argv
    if environ is None:
        environ = os.environ
    config, signing_set = usage(list(argv), environ)
    list_assets(config, signing_set)

if __name__ == "__main__":
    main()
