import pytest


def download(name: str) -> dict:
    return {"sha1": "0" * 40, "size": 1024, "url": f"https://piston-data.mojang.com/v1/objects/{name}"}


def artifact(path: str) -> dict:
    return {"path": path, **download(path.rsplit("/", 1)[-1])}


def asset_index(name: str) -> dict:
    return {"id": name, "sha1": "1" * 40, "size": 300, "totalSize": 150000, "url": f"https://piston-meta.mojang.com/{name}.json"}


def logging_config() -> dict:
    return {
        "client": {
            "argument": "-Dlog4j.configurationFile=${path}",
            "file": {"id": "client-1.12.xml", "sha1": "2" * 40, "size": 888, "url": "https://piston-data.mojang.com/client-1.12.xml"},
            "type": "log4j2-xml"
        }
    }


def legacy_libraries() -> list:
    return [
        {
            "name": "com.mojang:realms:1.3.5",
            "downloads": {"artifact": artifact("com/mojang/realms/1.3.5/realms-1.3.5.jar")}
        },
        {
            "name": "org.lwjgl.lwjgl:lwjgl-platform:2.9.1-nightly-20130708-debug3",
            "natives": {"linux": "natives-linux", "windows": "natives-windows-${arch}", "osx": "natives-osx"},
            "extract": {"exclude": ["META-INF/"]},
            "downloads": {
                "classifiers": {
                    "natives-linux": artifact("org/lwjgl/lwjgl/lwjgl-platform/2.9.1/lwjgl-platform-2.9.1-natives-linux.jar"),
                    "natives-windows-64": artifact("org/lwjgl/lwjgl/lwjgl-platform/2.9.1/lwjgl-platform-2.9.1-natives-windows-64.jar"),
                }
            }
        },
        {
            "name": "ca.weblite:java-objc-bridge:1.0.0",
            "rules": [{"action": "allow", "os": {"name": "osx"}}]
        },
    ]


def structured_libraries() -> list:
    return [
        {
            "name": "com.mojang:patchy:1.1",
            "downloads": {"artifact": artifact("com/mojang/patchy/1.1/patchy-1.1.jar")}
        },
        {
            "name": "org.lwjgl:lwjgl:3.2.2",
            "natives": {"linux": "natives-linux", "windows": "natives-windows", "osx": "natives-macos"},
            "downloads": {
                "artifact": artifact("org/lwjgl/lwjgl/3.2.2/lwjgl-3.2.2.jar"),
                "classifiers": {
                    "natives-linux": artifact("org/lwjgl/lwjgl/3.2.2/lwjgl-3.2.2-natives-linux.jar"),
                }
            }
        },
        {
            "name": "ca.weblite:java-objc-bridge:1.0.0",
            "rules": [{"action": "allow", "os": {"name": "osx"}}]
        },
    ]


def split_libraries() -> list:
    return [
        {
            "name": "com.mojang:patchy:2.2.10",
            "downloads": {"artifact": artifact("com/mojang/patchy/2.2.10/patchy-2.2.10.jar")}
        },
        {
            "name": "org.lwjgl:lwjgl:3.3.1",
            "downloads": {"artifact": artifact("org/lwjgl/lwjgl/3.3.1/lwjgl-3.3.1.jar")}
        },
        {
            "name": "org.lwjgl:lwjgl:3.3.1:natives-linux",
            "downloads": {"artifact": artifact("org/lwjgl/lwjgl/3.3.1/lwjgl-3.3.1-natives-linux.jar")},
            "rules": [{"action": "allow", "os": {"name": "linux"}}]
        },
        {
            "name": "org.lwjgl:lwjgl:3.3.1:natives-windows-x86",
            "downloads": {"artifact": artifact("org/lwjgl/lwjgl/3.3.1/lwjgl-3.3.1-natives-windows-x86.jar")},
            "rules": [{"action": "allow", "os": {"name": "windows", "arch": "x86"}}]
        },
    ]


def legacy_arguments() -> str:
    return "--username ${auth_player_name} --version ${version_name} --gameDir ${game_directory} " \
        "--assetsDir ${assets_root} --assetIndex ${assets_index_name} --uuid ${auth_uuid} " \
        "--accessToken ${auth_access_token} --userProperties ${user_properties} --userType ${user_type}"


def structured_arguments() -> dict:
    return {
        "game": [
            "--username", "${auth_player_name}",
            "--version", "${version_name}",
            "--gameDir", "${game_directory}",
            "--assetsDir", "${assets_root}",
            "--assetIndex", "${assets_index_name}",
            "--uuid", "${auth_uuid}",
            "--accessToken", "${auth_access_token}",
            "--userType", "${user_type}",
            "--versionType", "${version_type}",
            {"rules": [{"action": "allow", "features": {"is_demo_user": True}}], "value": "--demo"},
            {"rules": [{"action": "allow", "features": {"has_custom_resolution": True}}], "value": ["--width", "${resolution_width}", "--height", "${resolution_height}"]},
        ],
        "jvm": [
            {"rules": [{"action": "allow", "os": {"name": "osx"}}], "value": ["-XstartOnFirstThread"]},
            {"rules": [{"action": "allow", "os": {"name": "windows"}}], "value": "-XX:HeapDumpPath=MojangTricksIntelDriversForPerformance_javaw.exe_minecraft.exe.heapdump"},
            {"rules": [{"action": "allow", "os": {"name": "windows", "version": "^10\\."}}], "value": ["-Dos.name=Windows 10", "-Dos.version=10.0"]},
            {"rules": [{"action": "allow", "os": {"arch": "x86"}}], "value": "-Xss1M"},
            "-Djava.library.path=${natives_directory}",
            "-Dminecraft.launcher.brand=${launcher_name}",
            "-Dminecraft.launcher.version=${launcher_version}",
            "-cp",
            "${classpath}",
        ]
    }


def quick_play_arguments() -> list:
    return [
        {"rules": [{"action": "allow", "features": {"has_quick_plays_support": True}}], "value": ["--quickPlayPath", "${quickPlayPath}"]},
        {"rules": [{"action": "allow", "features": {"is_quick_play_singleplayer": True}}], "value": ["--quickPlaySingleplayer", "${quickPlaySingleplayer}"]},
        {"rules": [{"action": "allow", "features": {"is_quick_play_multiplayer": True}}], "value": ["--quickPlayMultiplayer", "${quickPlayMultiplayer}"]},
        {"rules": [{"action": "allow", "features": {"is_quick_play_realms": True}}], "value": ["--quickPlayRealms", "${quickPlayRealms}"]},
    ]


def build_v1() -> dict:
    return {
        "id": "1.7.10",
        "type": "release",
        "time": "2014-05-14T19:29:23+00:00",
        "releaseTime": "2014-05-14T19:29:23+00:00",
        "mainClass": "net.minecraft.client.main.Main",
        "minecraftArguments": legacy_arguments(),
        "minimumLauncherVersion": 13,
        "assets": "1.7.10",
        "assetIndex": asset_index("1.7.10"),
        "downloads": {"client": download("client.jar"), "server": download("server.jar"), "windows_server": download("windows_server.exe")},
        "libraries": legacy_libraries(),
    }


def build_v2() -> dict:
    return {
        "id": "1.12.2",
        "type": "release",
        "time": "2017-09-18T08:39:46+00:00",
        "releaseTime": "2017-09-18T08:39:46+00:00",
        "mainClass": "net.minecraft.client.main.Main",
        "minecraftArguments": legacy_arguments(),
        "minimumLauncherVersion": 18,
        "assets": "1.12",
        "assetIndex": asset_index("1.12"),
        "javaVersion": {"component": "jre-legacy", "majorVersion": 8},
        "downloads": {"client": download("client.jar"), "server": download("server.jar")},
        "logging": logging_config(),
        "libraries": legacy_libraries(),
    }


def build_v3() -> dict:
    return {
        "id": "1.13.2",
        "type": "release",
        "time": "2018-10-22T11:41:07+00:00",
        "releaseTime": "2018-10-22T11:41:07+00:00",
        "mainClass": "net.minecraft.client.main.Main",
        "arguments": structured_arguments(),
        "minimumLauncherVersion": 21,
        "assets": "1.13.1",
        "assetIndex": asset_index("1.13.1"),
        "complianceLevel": 0,
        "downloads": {"client": download("client.jar"), "server": download("server.jar")},
        "logging": logging_config(),
        "libraries": structured_libraries(),
    }


def build_v4() -> dict:
    return {
        "id": "1.16.5",
        "type": "release",
        "time": "2021-01-14T16:05:32+00:00",
        "releaseTime": "2021-01-14T16:05:32+00:00",
        "mainClass": "net.minecraft.client.main.Main",
        "arguments": structured_arguments(),
        "minimumLauncherVersion": 21,
        "assets": "1.16",
        "assetIndex": asset_index("1.16"),
        "complianceLevel": 1,
        "downloads": {
            "client": download("client.jar"),
            "client_mappings": download("client.txt"),
            "server": download("server.jar"),
            "server_mappings": download("server.txt"),
        },
        "logging": logging_config(),
        "libraries": structured_libraries(),
    }


def build_v5() -> dict:
    return {
        "id": "1.19.2",
        "type": "release",
        "time": "2022-08-05T11:57:05+00:00",
        "releaseTime": "2022-08-05T11:57:05+00:00",
        "mainClass": "net.minecraft.client.main.Main",
        "arguments": structured_arguments(),
        "minimumLauncherVersion": 21,
        "assets": "1.19",
        "assetIndex": asset_index("1.19"),
        "javaVersion": {"component": "java-runtime-gamma", "majorVersion": 17},
        "downloads": {
            "client": download("client.jar"),
            "client_mappings": download("client.txt"),
            "server": download("server.jar"),
            "server_mappings": download("server.txt"),
        },
        "logging": logging_config(),
        "libraries": split_libraries(),
    }


def build_v6() -> dict:
    data = build_v5()
    data.update({
        "id": "23w14a",
        "type": "snapshot",
        "time": "2023-04-05T12:05:17+00:00",
        "releaseTime": "2023-04-05T12:05:17+00:00",
        "assets": "5",
        "assetIndex": asset_index("5"),
        "complianceLevel": 1,
    })
    data["arguments"]["game"].extend(quick_play_arguments())
    return data


BUILDERS = {1: build_v1, 2: build_v2, 3: build_v3, 4: build_v4, 5: build_v5, 6: build_v6}


@pytest.fixture(params=sorted(BUILDERS.keys()))
def generation_doc(request):
    """Parametrized fixture giving a fresh metadata document of each generation along
    with its generation number.
    """
    return request.param, BUILDERS[request.param]()


@pytest.fixture
def manifest_doc():
    """Factory fixture building a fresh metadata document of the given generation.
    """
    return lambda version: BUILDERS[version]()


@pytest.fixture
def make_ctx():
    """Factory fixture building a predicate context, defaults to a 64 bits Linux.
    """

    from coppermc.rule import PredicateContext

    def make(os_name="linux", arch="x86_64", os_version="6.1.0", **kwargs):
        return PredicateContext(os_name, arch, os_version, **kwargs)

    return make


@pytest.fixture
def tmp_context(tmp_path):
    """Installation context in a temporary directory.
    """

    from coppermc.launch import Context
    return Context(tmp_path / "main", tmp_path / "work")
