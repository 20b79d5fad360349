# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
JavaScript probes evaluated inside a browser page.

Each script returns raw data (or null when the capability is missing).
Hashing happens in Python so every environment shares one digest function.
"""

# Key systems queried by the DRM probe, in order
DRM_KEY_SYSTEMS = ["com.apple.fps.1_0", "com.widevine.alpha"]

CANVAS_TEXT = "Composite Canvas FP"

# Frequency samples of a 10 kHz triangle wave routed through an analyser
AUDIO_SAMPLES_SCRIPT = """
async () => {
    const Ctx = window.AudioContext || window.webkitAudioContext;
    if (!Ctx) return null;
    const ctx = new Ctx();
    const osc = ctx.createOscillator();
    const analyser = ctx.createAnalyser();
    osc.type = 'triangle';
    osc.frequency.value = 10000;
    osc.connect(analyser);
    analyser.connect(ctx.destination);
    osc.start(0);
    const samples = new Float32Array(analyser.frequencyBinCount);
    analyser.getFloatFrequencyData(samples);
    osc.stop();
    await ctx.close();
    return samples.toString();
}
"""

# One "<id>:granted:<keySystem>" or "<id>:denied" entry per key system
DRM_ACCESS_SCRIPT = """
async (keySystems) => {
    if (!('requestMediaKeySystemAccess' in navigator)) return null;
    const cfg = [{
        initDataTypes: ['cenc'],
        videoCapabilities: [{ contentType: 'video/mp4' }],
    }];
    const results = [];
    for (const id of keySystems) {
        try {
            const access = await navigator.requestMediaKeySystemAccess(id, cfg);
            results.push(`${id}:granted:${access.keySystem}`);
        } catch (e) {
            results.push(`${id}:denied`);
        }
    }
    return results;
}
"""

CANVAS_DATA_URL_SCRIPT = """
(text) => {
    const canvas = document.createElement('canvas');
    canvas.width = 200;
    canvas.height = 50;
    const ctx = canvas.getContext('2d');
    if (!ctx) return null;
    ctx.textBaseline = 'top';
    ctx.font = "14px 'Arial'";
    ctx.fillStyle = '#f60';
    ctx.fillRect(125, 1, 62, 20);
    ctx.fillStyle = '#069';
    ctx.fillText(text, 2, 15);
    ctx.fillStyle = 'rgba(102,204,0,0.7)';
    ctx.fillText(text, 4, 17);
    return canvas.toDataURL();
}
"""

DEVICE_INFO_SCRIPT = """
() => ({
    userAgent: navigator.userAgent,
    screenRes: `${screen.width}x${screen.height}`,
    deviceMemory: navigator.deviceMemory || 'unknown',
    hardwareConcurrency: navigator.hardwareConcurrency || 'unknown',
})
"""

LOCALE_INFO_SCRIPT = """
() => ({
    timezone: Intl.DateTimeFormat().resolvedOptions().timeZone,
    language: navigator.language,
    languages: Array.from(navigator.languages || []),
})
"""

LOCAL_STORAGE_GET_SCRIPT = "(key) => window.localStorage.getItem(key)"

LOCAL_STORAGE_SET_SCRIPT = "([key, value]) => window.localStorage.setItem(key, value)"

# Resolves to 'opened', 'failed' or 'unsupported'
OPEN_TEST_DATABASE_SCRIPT = """
(name) => new Promise((resolve, reject) => {
    if (!window.indexedDB) {
        resolve('unsupported');
        return;
    }
    try {
        const request = indexedDB.open(name);
        request.onerror = () => resolve('failed');
        request.onsuccess = () => {
            request.result.close();
            indexedDB.deleteDatabase(name);
            resolve('opened');
        };
    } catch (e) {
        reject(e);
    }
})
"""

STORAGE_QUOTA_SCRIPT = """
async () => {
    if (!navigator.storage || !navigator.storage.estimate) return null;
    const { quota } = await navigator.storage.estimate();
    return quota || 0;
}
"""
